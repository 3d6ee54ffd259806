"""
Client layer - User-facing API.

This module provides:
- Anthropic: Main entry point with the ``messages`` namespace
- Builders for requests, messages and client configuration
- BlockingBridge: synchronous calls over the async client
- CancelToken: cancellation of blocking calls
"""

from claude_client.client.blocking import BlockingBridge
from claude_client.client.builder import (
    ClientConfigBuilder,
    MessageBuilder,
    MessageRequestBuilder,
    build_config,
    build_message,
    build_request,
)
from claude_client.client.cancel import CancelReason, CancelState, CancelToken
from claude_client.client.config import (
    DEFAULT_ANTHROPIC_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    ClientConfig,
)
from claude_client.client.core import MESSAGES_ENDPOINT, Anthropic, Messages
from claude_client.client.usage import UsageCollector

__all__ = [
    "Anthropic",
    "BlockingBridge",
    "CancelReason",
    "CancelState",
    "CancelToken",
    "ClientConfig",
    "ClientConfigBuilder",
    "DEFAULT_ANTHROPIC_VERSION",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "MESSAGES_ENDPOINT",
    "MessageBuilder",
    "MessageRequestBuilder",
    "Messages",
    "UsageCollector",
    "build_config",
    "build_message",
    "build_request",
]
