"""
Async client for a local Ollama server.
Streams chat completions as NDJSON and lists installed models.
"""

import json
from typing import Any, AsyncGenerator, Mapping, Optional, Protocol, Sequence

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from openklaw.core.config import settings
from openklaw.core.exceptions import CompletionServiceError
from openklaw.core.logging import get_logger
from openklaw.domain.chat import ChatChunk, ChatMessage

logger = get_logger(__name__)


class ChatCompletionService(Protocol):
    """
    Anything that can stream a chat completion.

    ``chat`` returns an async generator of chunks that ends once and cannot be restarted.
    """

    def chat(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        options: Optional[Mapping[str, Any]] = None,
    ) -> AsyncGenerator[ChatChunk, None]:
        ...


class OllamaClient:
    """
    Chat completion service backed by the Ollama HTTP API.

    Generation requests are never retried here; retrying is the caller's call.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        chat_timeout: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the Ollama client.

        Args:
            base_url: Ollama server URL
            chat_timeout: Read timeout for chat streams in seconds
            transport: Custom httpx transport (used by tests)
        """
        self.base_url = (base_url or settings.ollama.base_url).rstrip("/")
        self.chat_timeout = chat_timeout or settings.ollama.chat_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.chat_timeout),
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def chat(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        options: Optional[Mapping[str, Any]] = None,
    ) -> AsyncGenerator[ChatChunk, None]:
        """
        Stream a chat completion.

        Args:
            model: Model id, e.g. "qwen2.5:3b-instruct"
            messages: Prompt messages in order
            options: Generation options such as temperature

        Yields:
            ChatChunk per NDJSON line, in the order the server sends them

        Raises:
            CompletionServiceError: On HTTP errors, error records in the
                stream, malformed lines, or a stream that stops before the
                final ``done`` record
        """
        payload = {
            "model": model,
            "messages": [m.model_dump() for m in messages],
            "stream": True,
            "options": dict(options or {}),
        }
        client = self._get_client()
        completed = False

        try:
            async with client.stream("POST", "/api/chat", json=payload) as response:
                if response.status_code != httpx.codes.OK:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    logger.error(
                        "Chat request failed",
                        model=model,
                        status_code=response.status_code,
                        response_text=body[:200],
                    )
                    raise CompletionServiceError(
                        f"chat failed: HTTP {response.status_code}",
                        details={"status_code": response.status_code, "model": model},
                    )

                async for line in response.aiter_lines():
                    if not line.strip():
                        continue

                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError as e:
                        raise CompletionServiceError(
                            "malformed stream record", details={"line": line[:200]}
                        ) from e

                    if data.get("error"):
                        raise CompletionServiceError(
                            str(data["error"]), details={"model": model}
                        )

                    chunk = ChatChunk.from_source(data)
                    yield chunk

                    if chunk.done:
                        completed = True
                        break

        except httpx.HTTPError as e:
            logger.error("Chat stream interrupted", model=model, error=str(e))
            raise CompletionServiceError(
                f"chat request failed: {e}", details={"model": model}
            ) from e

        if not completed:
            raise CompletionServiceError(
                "stream ended before completion", details={"model": model}
            )

    async def is_running(self) -> bool:
        """Check whether the Ollama server answers."""
        try:
            response = await self._get_client().get(
                "/api/tags",
                timeout=settings.ollama.health_check_timeout,
            )
        except httpx.HTTPError:
            return False
        return response.status_code == httpx.codes.OK

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def _fetch_tags(self) -> dict[str, Any]:
        response = await self._get_client().get(
            "/api/tags",
            timeout=settings.ollama.list_models_timeout,
        )
        response.raise_for_status()
        return response.json()

    async def list_models(self) -> list[str]:
        """
        List the models installed on the server.

        Raises:
            CompletionServiceError: If the server cannot be reached
        """
        try:
            data = await self._fetch_tags()
        except httpx.HTTPStatusError as e:
            raise CompletionServiceError(
                f"failed to list models: HTTP {e.response.status_code}",
                details={"status_code": e.response.status_code},
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise CompletionServiceError(f"failed to list models: {e}") from e

        return [m["name"] for m in data.get("models", []) if m.get("name")]

    async def __aenter__(self) -> "OllamaClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
