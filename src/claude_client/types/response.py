"""
Response types for the Messages API.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, field_validator

from claude_client.types.content import ContentBlock, join_text, parse_content
from claude_client.types.message import Message, Role
from claude_client.types.model import Cost


class StopReason(str, Enum):
    """Why the model stopped generating."""

    END_TURN = "end_turn"
    MAX_TOKENS = "max_tokens"
    STOP_SEQUENCE = "stop_sequence"
    TOOL_USE = "tool_use"


class Usage(BaseModel):
    """Token usage of one call, or accumulated over many."""

    model_config = ConfigDict(frozen=True)

    ZERO: ClassVar[Usage]

    input_tokens: int
    output_tokens: int
    cache_creation_input_tokens: int | None = None
    cache_read_input_tokens: int | None = None

    def __add__(self, other: Usage) -> Usage:
        return Usage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            cache_creation_input_tokens=(self.cache_creation_input_tokens or 0)
            + (other.cache_creation_input_tokens or 0),
            cache_read_input_tokens=(self.cache_read_input_tokens or 0)
            + (other.cache_read_input_tokens or 0),
        )

    def cost(self, model_cost: Cost) -> Cost:
        """Price this usage with per-token model pricing."""
        return Cost(
            input_tokens=self.input_tokens * model_cost.input_tokens,
            output_tokens=self.output_tokens * model_cost.output_tokens,
            cache_creation_input_tokens=(self.cache_creation_input_tokens or 0)
            * model_cost.cache_creation_input_tokens,  # type: ignore[operator]
            cache_read_input_tokens=(self.cache_read_input_tokens or 0)
            * model_cost.cache_read_input_tokens,  # type: ignore[operator]
        )


Usage.ZERO = Usage(
    input_tokens=0,
    output_tokens=0,
    cache_creation_input_tokens=0,
    cache_read_input_tokens=0,
)


class MessageResponse(BaseModel):
    """Response to a message request.

    Attributes:
        id: Unique message id assigned by the service
        role: Always ASSISTANT for generated messages
        content: Generated content blocks
        model: Model that produced the response
        stop_reason: Why generation stopped
        stop_sequence: Which stop sequence was hit, if any
        usage: Token usage of this call
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: Literal["message"] = "message"
    role: Role
    content: tuple[SerializeAsAny[ContentBlock], ...] = Field(default=())
    model: str | None = None
    stop_reason: StopReason | None = None
    stop_sequence: str | None = None
    usage: Usage

    @field_validator("content", mode="before")
    @classmethod
    def _parse_content(cls, value: Any) -> tuple[ContentBlock, ...]:
        return parse_content(value)

    @property
    def text(self) -> str | None:
        """Text of all text blocks joined by newlines, or None."""
        return join_text(self.content)

    def as_message(self) -> Message:
        """Turn this response into an assistant message for the next request."""
        return Message(role=Role.ASSISTANT, content=self.content)
