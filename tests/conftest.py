"""
Pytest configuration and fixtures.
"""

from datetime import date
from typing import Any, AsyncGenerator, Mapping, Optional, Sequence

import pytest

from openklaw.domain.chat import ChatChunk, ChatMessage
from openklaw.llm.streaming import CompletionStreamConsumer
from openklaw.services.report_service import ReportGenerator
from openklaw.stores.storage import JsonFileStorage
from openklaw.templates.registry import TemplateRegistry


class FakeChatService:
    """
    In-memory chat completion service.

    Yields the given chunk records in order, then raises ``error`` if set.
    Every call is recorded on ``calls``.
    """

    def __init__(
        self,
        chunks: Sequence[Mapping[str, Any]] = (),
        error: Optional[BaseException] = None,
    ) -> None:
        self.chunks = list(chunks)
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def chat(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        options: Optional[Mapping[str, Any]] = None,
    ) -> AsyncGenerator[ChatChunk, None]:
        self.calls.append({"model": model, "messages": list(messages), "options": dict(options or {})})
        for record in self.chunks:
            yield ChatChunk.from_source(record)
        if self.error is not None:
            raise self.error

    @staticmethod
    def content(text: str) -> dict[str, Any]:
        """A chunk record carrying ``text``."""
        return {"model": "test-model", "message": {"role": "assistant", "content": text}, "done": False}


@pytest.fixture
def chat_service_cls() -> type[FakeChatService]:
    return FakeChatService


@pytest.fixture
def registry() -> TemplateRegistry:
    """Registry over the bundled catalog."""
    registry = TemplateRegistry()
    registry.initialize()
    return registry


@pytest.fixture
def fake_service() -> FakeChatService:
    return FakeChatService(
        chunks=[
            FakeChatService.content("# 보고서\n"),
            FakeChatService.content("본문"),
            {"done": True},
        ],
    )


@pytest.fixture
def fixed_today() -> date:
    return date(2024, 1, 15)


@pytest.fixture
def make_generator(registry: TemplateRegistry, fixed_today: date):
    """Factory building a ReportGenerator over a given fake service."""

    def factory(service: FakeChatService, **kwargs: Any) -> ReportGenerator:
        kwargs.setdefault("model", "test-model")
        kwargs.setdefault("locale", "ko")
        return ReportGenerator(
            registry=registry,
            consumer=CompletionStreamConsumer(service),
            clock=lambda: fixed_today,
            **kwargs,
        )

    return factory


@pytest.fixture
def storage(tmp_path) -> JsonFileStorage:
    return JsonFileStorage(tmp_path / "data")
