"""Chat completion backend and stream consumption."""

from .ollama_client import ChatCompletionService, OllamaClient
from .streaming import CompletionStreamConsumer, StreamStats

__all__ = [
    "ChatCompletionService",
    "CompletionStreamConsumer",
    "OllamaClient",
    "StreamStats",
]
