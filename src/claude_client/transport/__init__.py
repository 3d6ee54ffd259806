"""
Transport layer - HTTP communication and wire encoding.

Provides:
- Transport protocol consumed by the client
- httpx-based HttpTransport
- API key resolution and auth headers
- JSON codec for requests and responses
"""

from claude_client.transport.auth import API_KEY_ENV, get_auth_headers, resolve_api_key
from claude_client.transport.base import Transport, TransportResponse
from claude_client.transport.codec import decode_error_body, decode_response, encode_request
from claude_client.transport.http import HttpTransport

__all__ = [
    "API_KEY_ENV",
    "HttpTransport",
    "Transport",
    "TransportResponse",
    "decode_error_body",
    "decode_response",
    "encode_request",
    "get_auth_headers",
    "resolve_api_key",
]
