"""Error hierarchy for claude-client-python."""

from claude_client.errors.base import (
    ApiError,
    CancellationError,
    ClientError,
    ConfigurationError,
    DecodeError,
    ErrorContext,
    IllegalStateError,
    TransportError,
    ValidationError,
)

__all__ = [
    "ApiError",
    "CancellationError",
    "ClientError",
    "ConfigurationError",
    "DecodeError",
    "ErrorContext",
    "IllegalStateError",
    "TransportError",
    "ValidationError",
]
