"""
JSON codec between the data model and wire payloads.
"""

from __future__ import annotations

import json
from typing import Any

import pydantic

from claude_client.errors import DecodeError, ValidationError
from claude_client.types.message import MessageRequest
from claude_client.types.response import MessageResponse


def encode_request(request: MessageRequest) -> bytes:
    """Serialize a request; unset options are omitted."""
    return request.model_dump_json(exclude_none=True).encode("utf-8")


def decode_response(payload: bytes) -> MessageResponse:
    """Parse a response payload.

    Raises:
        DecodeError: If the payload is not JSON or does not have the
            response shape, including unknown content block types
    """
    try:
        return MessageResponse.model_validate_json(payload)
    except pydantic.ValidationError as e:
        raise DecodeError(
            f"Invalid message response: {e.error_count()} error(s)",
            payload=payload,
            cause=e,
        ) from e
    except ValidationError as e:
        raise DecodeError(
            f"Invalid message response: {e.message}", payload=payload, cause=e
        ) from e


def decode_error_body(payload: bytes) -> dict[str, Any] | None:
    """Parse an error response body, or None if it is not a JSON object."""
    try:
        body = json.loads(payload)
    except (ValueError, UnicodeDecodeError):
        return None
    return body if isinstance(body, dict) else None
