"""
Chat message and streamed chunk models exchanged with the completion backend.
"""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from openklaw.core.constants import MessageRole


class ChatMessage(BaseModel):
    """One prompt element sent to the completion service."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: MessageRole
    content: str

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.USER, content=content)


class ChunkMessage(BaseModel):
    """The message fragment carried by a streamed chunk."""

    role: str = Field(default=MessageRole.ASSISTANT.value)
    content: Optional[str] = None


class ChatChunk(BaseModel):
    """
    One incremental unit of a streamed chat response.

    Metadata-only chunks (the final ``done`` record, keep-alives) carry no
    message or an empty one.
    """

    model: str = ""
    message: Optional[ChunkMessage] = None
    done: bool = False
    done_reason: Optional[str] = None

    @property
    def content(self) -> str:
        if self.message is None or not self.message.content:
            return ""
        return self.message.content

    @classmethod
    def from_source(cls, source: Mapping[str, Any]) -> "ChatChunk":
        """Decode a chunk field by field from an untyped mapping."""
        message = source.get("message")
        return cls(
            model=source.get("model") or "",
            message=ChunkMessage(
                role=message.get("role") or MessageRole.ASSISTANT.value,
                content=message.get("content"),
            )
            if isinstance(message, Mapping)
            else None,
            done=bool(source.get("done", False)),
            done_reason=source.get("done_reason"),
        )
