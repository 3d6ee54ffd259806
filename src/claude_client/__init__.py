"""claude-client-python: typed client for the Messages API.

Requests are assembled with a builder DSL and sent either asynchronously
(``await client.messages.create(...)``) or from synchronous code
(``client.messages.create_blocking(...)``).
"""
from __future__ import annotations

from claude_client.client import (
    Anthropic,
    CancelReason,
    CancelToken,
    ClientConfig,
    ClientConfigBuilder,
    MessageBuilder,
    MessageRequestBuilder,
)
from claude_client.errors import (
    ApiError,
    CancellationError,
    ClientError,
    ConfigurationError,
    DecodeError,
    IllegalStateError,
    TransportError,
    ValidationError,
)
from claude_client.types import (
    CacheControl,
    ContentBlock,
    Cost,
    Message,
    MessageRequest,
    MessageResponse,
    Model,
    ModelSpec,
    Role,
    StopReason,
    Text,
    Usage,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "Anthropic",
    "CancelReason",
    "CancelToken",
    "ClientConfig",
    "ClientConfigBuilder",
    "MessageBuilder",
    "MessageRequestBuilder",
    # Errors
    "ApiError",
    "CancellationError",
    "ClientError",
    "ConfigurationError",
    "DecodeError",
    "IllegalStateError",
    "TransportError",
    "ValidationError",
    # Types
    "CacheControl",
    "ContentBlock",
    "Cost",
    "Message",
    "MessageRequest",
    "MessageResponse",
    "Model",
    "ModelSpec",
    "Role",
    "StopReason",
    "Text",
    "Usage",
    # Version
    "__version__",
]
