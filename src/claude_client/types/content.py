"""
Content blocks carried by messages and responses.

Every block has a ``type`` discriminator. Subclasses of ContentBlock that
declare a ``type`` literal default register themselves, so decoding picks
up new variants without changes here.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from claude_client.errors import ValidationError

_CONTENT_TYPES: dict[str, type[ContentBlock]] = {}


class ContentBlock(BaseModel):
    """Base class of all content block variants."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(description="Content block type")

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        type_field = cls.model_fields.get("type")
        if type_field is not None and isinstance(type_field.default, str):
            _CONTENT_TYPES[type_field.default] = cls

    @classmethod
    def parse(cls, data: Any) -> ContentBlock:
        """Turn a wire object into the registered variant for its ``type``.

        Raises:
            ValueError: If the object is not a mapping or its type is unknown
        """
        if isinstance(data, ContentBlock):
            return data
        if not isinstance(data, Mapping):
            raise ValueError(f"content block must be an object, got {type(data).__name__}")
        block_type = data.get("type")
        variant = _CONTENT_TYPES.get(block_type)  # type: ignore[arg-type]
        if variant is None:
            raise ValueError(f"unsupported content block type: {block_type!r}")
        return variant.model_validate(data)

    @staticmethod
    def registered_types() -> frozenset[str]:
        """Return the ``type`` values that can be decoded."""
        return frozenset(_CONTENT_TYPES)


class CacheControl(BaseModel):
    """Prompt caching marker attached to a content block."""

    model_config = ConfigDict(frozen=True)

    type: Literal["ephemeral"] = "ephemeral"


class Text(ContentBlock):
    """Plain text content.

    Example:
        >>> Text("Hi Claude")
        Text(type='text', text='Hi Claude', cache_control=None)
    """

    type: Literal["text"] = "text"
    text: str = Field(description="Text content")
    cache_control: CacheControl | None = Field(default=None, description="Cache marker")

    def __init__(self, text: str | None = None, /, **data: Any) -> None:
        if text is not None:
            data["text"] = text
        if data.get("text") is None:
            raise ValidationError("text must be provided", field="text")
        super().__init__(**data)

    @property
    def is_empty(self) -> bool:
        return self.text == ""


def parse_content(value: Any) -> tuple[ContentBlock, ...]:
    """Normalize message content into a tuple of blocks.

    A bare string becomes a single Text block; any other iterable is parsed
    block by block, preserving order.
    """
    if isinstance(value, str):
        return (Text(value),)
    if isinstance(value, (ContentBlock, Mapping)):
        return (ContentBlock.parse(value),)
    if not isinstance(value, Iterable):
        raise ValueError(f"content must be a string or a sequence of blocks, got {type(value).__name__}")
    return tuple(ContentBlock.parse(item) for item in value)


def join_text(blocks: Iterable[ContentBlock], separator: str = "\n") -> str | None:
    """Join the text of all Text blocks, or None when there are none."""
    texts = [block.text for block in blocks if isinstance(block, Text)]
    if not texts:
        return None
    return separator.join(texts)
