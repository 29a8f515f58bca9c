"""
Tests for the Ollama HTTP client, using httpx mock transports.
"""

import json
from typing import AsyncIterator

import httpx
import pytest

from openklaw.core.exceptions import CompletionServiceError, GenerationFailure
from openklaw.domain.chat import ChatMessage
from openklaw.llm.ollama_client import OllamaClient
from openklaw.llm.streaming import CompletionStreamConsumer
from openklaw.services.report_service import ReportGenerator

MESSAGES = [ChatMessage.system("지시"), ChatMessage.user("요청")]


def ndjson(*records: dict) -> bytes:
    return "".join(json.dumps(r, ensure_ascii=False) + "\n" for r in records).encode("utf-8")


def chunk(text: str) -> dict:
    return {"model": "m", "message": {"role": "assistant", "content": text}, "done": False}


class BrokenStream(httpx.AsyncByteStream):
    """Sends some bytes, then drops the connection."""

    def __init__(self, first: bytes) -> None:
        self.first = first

    async def __aiter__(self) -> AsyncIterator[bytes]:
        yield self.first
        raise httpx.ReadError("connection dropped")


async def collect(client: OllamaClient) -> list:
    return [c async for c in client.chat("m", MESSAGES, {"temperature": 0.7})]


@pytest.mark.asyncio
async def test_chat_streams_chunks_and_sends_payload() -> None:
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            content=ndjson(chunk("안녕"), chunk("하세요"), {"model": "m", "done": True, "done_reason": "stop"}),
        )

    async with OllamaClient(transport=httpx.MockTransport(handler)) as client:
        chunks = await collect(client)

    assert [c.content for c in chunks] == ["안녕", "하세요", ""]
    assert chunks[-1].done is True
    assert captured["path"] == "/api/chat"
    assert captured["body"] == {
        "model": "m",
        "messages": [
            {"role": "system", "content": "지시"},
            {"role": "user", "content": "요청"},
        ],
        "stream": True,
        "options": {"temperature": 0.7},
    }


@pytest.mark.asyncio
async def test_blank_lines_are_ignored() -> None:
    body = b"\n" + ndjson(chunk("A")) + b"\n\n" + ndjson({"done": True})
    client = OllamaClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, content=body)))

    chunks = await collect(client)

    assert [c.content for c in chunks] == ["A", ""]


@pytest.mark.asyncio
async def test_http_error_status() -> None:
    client = OllamaClient(
        transport=httpx.MockTransport(lambda r: httpx.Response(404, json={"error": "model not found"}))
    )

    with pytest.raises(CompletionServiceError, match="HTTP 404"):
        await collect(client)


@pytest.mark.asyncio
async def test_error_record_in_stream() -> None:
    body = ndjson(chunk("A"), {"error": "out of memory"})
    client = OllamaClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, content=body)))

    with pytest.raises(CompletionServiceError, match="out of memory"):
        await collect(client)


@pytest.mark.asyncio
async def test_stream_without_done_is_incomplete() -> None:
    body = ndjson(chunk("A"), chunk("B"))
    client = OllamaClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, content=body)))

    with pytest.raises(CompletionServiceError, match="stream ended before completion"):
        await collect(client)


@pytest.mark.asyncio
async def test_malformed_line() -> None:
    client = OllamaClient(
        transport=httpx.MockTransport(lambda r: httpx.Response(200, content=b"not json\n"))
    )

    with pytest.raises(CompletionServiceError, match="malformed"):
        await collect(client)


@pytest.mark.asyncio
async def test_dropped_connection_fails_report_generation(registry) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=BrokenStream(ndjson(chunk("초안 "))))

    client = OllamaClient(transport=httpx.MockTransport(handler))
    generator = ReportGenerator(registry, CompletionStreamConsumer(client), model="m")

    with pytest.raises(GenerationFailure) as exc_info:
        await generator.generate_report("proposal", {"title": "자동화 제안"})

    assert exc_info.value.partial_content == "초안 "
    await client.close()


@pytest.mark.asyncio
async def test_report_generation_end_to_end(registry) -> None:
    body = ndjson(chunk("# 제안서\n"), chunk("내용"), {"done": True})
    client = OllamaClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, content=body)))
    generator = ReportGenerator(registry, CompletionStreamConsumer(client), model="m")

    result = await generator.generate_report("proposal", {"title": "자동화 제안"})

    assert result.title == "제안서 - 자동화 제안"
    assert result.content == "# 제안서\n내용"
    assert result.template == "proposal"
    await client.close()


@pytest.mark.asyncio
async def test_list_models() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/tags"
        return httpx.Response(
            200, json={"models": [{"name": "qwen2.5:3b-instruct"}, {"name": "gemma2:2b"}]}
        )

    async with OllamaClient(transport=httpx.MockTransport(handler)) as client:
        assert await client.list_models() == ["qwen2.5:3b-instruct", "gemma2:2b"]


@pytest.mark.asyncio
async def test_list_models_http_error() -> None:
    client = OllamaClient(transport=httpx.MockTransport(lambda r: httpx.Response(500)))

    with pytest.raises(CompletionServiceError, match="HTTP 500"):
        await client.list_models()


@pytest.mark.asyncio
async def test_is_running() -> None:
    up = OllamaClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"models": []})))
    assert await up.is_running() is True

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    down = OllamaClient(transport=httpx.MockTransport(refuse))
    assert await down.is_running() is False
