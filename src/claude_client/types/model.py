"""
Known models and their token pricing.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

_PER_MILLION = Decimal("0.000001")


@dataclass(frozen=True)
class Cost:
    """Dollar amounts, either per token (model pricing) or accumulated.

    Cache write and read prices default to 1.25x and 0.1x the input price.
    """

    input_tokens: Decimal
    output_tokens: Decimal
    cache_creation_input_tokens: Decimal | None = None
    cache_read_input_tokens: Decimal | None = None

    def __post_init__(self) -> None:
        if self.cache_creation_input_tokens is None:
            object.__setattr__(
                self, "cache_creation_input_tokens", self.input_tokens * Decimal("1.25")
            )
        if self.cache_read_input_tokens is None:
            object.__setattr__(
                self, "cache_read_input_tokens", self.input_tokens * Decimal("0.1")
            )

    @classmethod
    def per_million(cls, input_tokens: str, output_tokens: str) -> Cost:
        """Create pricing from dollars-per-million-tokens strings."""
        return cls(
            input_tokens=Decimal(input_tokens) * _PER_MILLION,
            output_tokens=Decimal(output_tokens) * _PER_MILLION,
        )

    def __add__(self, other: Cost) -> Cost:
        return Cost(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            cache_creation_input_tokens=self.cache_creation_input_tokens  # type: ignore[operator]
            + other.cache_creation_input_tokens,
            cache_read_input_tokens=self.cache_read_input_tokens  # type: ignore[operator]
            + other.cache_read_input_tokens,
        )

    @property
    def total(self) -> Decimal:
        return (
            self.input_tokens
            + self.output_tokens
            + self.cache_creation_input_tokens  # type: ignore[operator]
            + self.cache_read_input_tokens
        )


ZERO_COST = Cost(Decimal(0), Decimal(0))


@dataclass(frozen=True)
class ModelSpec:
    """Limits and pricing of a model."""

    context_window: int
    max_output: int
    cost: Cost


class Model(str, Enum):
    """Models known to the client."""

    CLAUDE_3_5_SONNET = "claude-3-5-sonnet-latest"
    CLAUDE_3_5_SONNET_20241022 = "claude-3-5-sonnet-20241022"
    CLAUDE_3_5_HAIKU = "claude-3-5-haiku-latest"
    CLAUDE_3_5_HAIKU_20241022 = "claude-3-5-haiku-20241022"
    CLAUDE_3_OPUS = "claude-3-opus-latest"
    CLAUDE_3_OPUS_20240229 = "claude-3-opus-20240229"
    CLAUDE_3_HAIKU_20240307 = "claude-3-haiku-20240307"

    @property
    def spec(self) -> ModelSpec:
        return _MODEL_SPECS[self]

    @property
    def max_output(self) -> int:
        return self.spec.max_output

    @property
    def context_window(self) -> int:
        return self.spec.context_window

    @property
    def cost(self) -> Cost:
        return self.spec.cost

    @classmethod
    def default(cls) -> Model:
        return cls.CLAUDE_3_5_SONNET

    @classmethod
    def find(cls, model_id: str) -> Model | None:
        """Look up a model by id, or None if it is not known."""
        try:
            return cls(model_id)
        except ValueError:
            return None


_SONNET = ModelSpec(200_000, 8192, Cost.per_million("3", "15"))
_HAIKU = ModelSpec(200_000, 8192, Cost.per_million("0.80", "4"))
_OPUS = ModelSpec(200_000, 4096, Cost.per_million("15", "75"))

_MODEL_SPECS: dict[Model, ModelSpec] = {
    Model.CLAUDE_3_5_SONNET: _SONNET,
    Model.CLAUDE_3_5_SONNET_20241022: _SONNET,
    Model.CLAUDE_3_5_HAIKU: _HAIKU,
    Model.CLAUDE_3_5_HAIKU_20241022: _HAIKU,
    Model.CLAUDE_3_OPUS: _OPUS,
    Model.CLAUDE_3_OPUS_20240229: _OPUS,
    Model.CLAUDE_3_HAIKU_20240307: ModelSpec(200_000, 4096, Cost.per_million("0.25", "1.25")),
}


def find_spec(model_id: str, custom: Mapping[str, ModelSpec] | None = None) -> ModelSpec | None:
    """Limits and pricing for a model id.

    Entries of ``custom`` take precedence over the built-in catalogue, so
    callers can price models this release does not know yet.
    """
    if custom and model_id in custom:
        return custom[model_id]
    model = Model.find(model_id)
    return model.spec if model else None
