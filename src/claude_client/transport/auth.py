"""
API key resolution and request headers.

Resolves API keys from:
1. Explicit value
2. The ANTHROPIC_API_KEY environment variable
"""

from __future__ import annotations

import os
from collections.abc import Sequence

API_KEY_ENV = "ANTHROPIC_API_KEY"


def resolve_api_key(explicit_key: str | None = None) -> str | None:
    """Resolve the API key.

    Args:
        explicit_key: Explicitly provided API key

    Returns:
        Resolved API key or None if not found
    """
    if explicit_key:
        return explicit_key

    key = os.getenv(API_KEY_ENV)
    if key:
        return key

    return None


def get_auth_headers(
    api_key: str,
    anthropic_version: str,
    beta: Sequence[str] = (),
) -> dict[str, str]:
    """Build the authentication and versioning headers.

    Args:
        api_key: API key sent as ``x-api-key``
        anthropic_version: API version sent as ``anthropic-version``
        beta: Beta feature ids, comma-joined into ``anthropic-beta``

    Returns:
        Dictionary of headers
    """
    headers = {
        "x-api-key": api_key,
        "anthropic-version": anthropic_version,
    }
    if beta:
        headers["anthropic-beta"] = ",".join(beta)
    return headers
