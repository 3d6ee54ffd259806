"""
Conversation turns and the request that carries them.

Provides:
- Role: who authored a turn
- Message: one role-attributed turn with ordered content blocks
- MessageRequest: the frozen payload sent to the Messages API
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, field_validator

from claude_client.types.content import ContentBlock, Text, join_text, parse_content


class Role(str, Enum):
    """Message role enumeration."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """One turn of a conversation.

    Equality is structural: two messages with the same role and the same
    ordered content are equal.

    Examples:
        >>> Message(role=Role.USER, content=[Text("Hello!")])
        >>> Message.user("Hello!")
    """

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Message role")
    content: tuple[SerializeAsAny[ContentBlock], ...] = Field(
        default=(), description="Ordered content blocks"
    )

    @field_validator("content", mode="before")
    @classmethod
    def _parse_content(cls, value: Any) -> tuple[ContentBlock, ...]:
        return parse_content(value)

    @classmethod
    def user(cls, text: str) -> Message:
        """Create a user message with a single text block."""
        return cls(role=Role.USER, content=(Text(text),))

    @classmethod
    def assistant(cls, text: str) -> Message:
        """Create an assistant message with a single text block."""
        return cls(role=Role.ASSISTANT, content=(Text(text),))

    @property
    def text(self) -> str | None:
        """Text of all text blocks joined by newlines, or None."""
        return join_text(self.content)


class SystemPrompt(BaseModel):
    """System prompt text block."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class Metadata(BaseModel):
    """Request metadata."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(description="Opaque identifier of the end user")


class MessageRequest(BaseModel):
    """Frozen request for the Messages API.

    Built through MessageRequestBuilder; the builder validates before it
    constructs one of these.
    """

    model_config = ConfigDict(frozen=True)

    model: str
    max_tokens: int
    messages: tuple[Message, ...]
    system: tuple[SystemPrompt, ...] | None = None
    temperature: float | None = None
    top_k: int | None = None
    top_p: float | None = None
    stop_sequences: tuple[str, ...] | None = None
    metadata: Metadata | None = None
