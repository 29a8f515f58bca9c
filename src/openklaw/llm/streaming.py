"""
Completion stream consumer.
Drives a streamed chat completion to the end and aggregates its content.
"""

import asyncio
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, Union

from openklaw.core.exceptions import GenerationFailure
from openklaw.core.logging import get_logger
from openklaw.domain.chat import ChatMessage
from openklaw.llm.ollama_client import ChatCompletionService

logger = get_logger(__name__)

ContentCallback = Callable[[str], Union[None, Awaitable[None]]]


@dataclass
class StreamStats:
    """Counters for one consumed stream."""

    chunks: int = 0
    content_chunks: int = 0
    content_length: int = 0


class CompletionStreamConsumer:
    """
    Consumes a chat completion stream in arrival order.

    Only chunks with non-empty ``message.content`` contribute; everything
    else (metadata records, keep-alives) is skipped. A stream that fails
    part way raises ``GenerationFailure`` holding what had arrived so far.
    """

    def __init__(self, service: ChatCompletionService) -> None:
        """
        Initialize the consumer.

        Args:
            service: Chat completion service to stream from
        """
        self.service = service
        self.last_stats: Optional[StreamStats] = None

    async def consume(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        options: Mapping[str, Any],
        on_content: Optional[ContentCallback] = None,
    ) -> str:
        """
        Stream a completion and return its full content.

        Args:
            model: Model id
            messages: Prompt messages
            options: Generation options (at least ``temperature``)
            on_content: Called with each contributing delta, sync or async

        Returns:
            Concatenation of every contributing chunk's content

        Raises:
            GenerationFailure: If the stream errors or is interrupted before it finishes
            asyncio.CancelledError: If the calling task itself was cancelled
        """
        stats = StreamStats()
        self.last_stats = stats
        parts: list[str] = []

        try:
            async with aclosing(self.service.chat(model, messages, options)) as stream:
                async for chunk in stream:
                    stats.chunks += 1
                    content = chunk.content
                    if not content:
                        continue

                    parts.append(content)
                    stats.content_chunks += 1
                    stats.content_length += len(content)

                    if on_content is not None:
                        result = on_content(content)
                        if asyncio.iscoroutine(result):
                            await result

        except asyncio.CancelledError as e:
            partial = "".join(parts)
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                # The caller cancelled us; cancellation must propagate
                logger.warning(
                    "Completion stream cancelled",
                    model=model,
                    chunks=stats.chunks,
                    partial_length=len(partial),
                )
                raise

            logger.error(
                "Completion stream interrupted",
                model=model,
                chunks=stats.chunks,
                partial_length=len(partial),
            )
            raise GenerationFailure(
                "completion stream was interrupted", partial_content=partial
            ) from e

        except Exception as e:
            partial = "".join(parts)
            logger.error(
                "Completion stream failed",
                model=model,
                chunks=stats.chunks,
                partial_length=len(partial),
                error=str(e),
            )
            raise GenerationFailure(str(e), partial_content=partial) from e

        logger.debug(
            "Completion stream finished",
            model=model,
            chunks=stats.chunks,
            content_chunks=stats.content_chunks,
            content_length=stats.content_length,
        )

        return "".join(parts)
