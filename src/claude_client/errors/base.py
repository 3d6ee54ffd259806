"""Base error classes for claude-client-python.

Provides a layered error hierarchy:
- ClientError: Base class for all library errors
- ValidationError: Malformed request or message, raised at freeze time
- ConfigurationError: Invalid or incomplete client configuration
- IllegalStateError: Misuse of a builder or client lifecycle
- TransportError: Network failure or non-success status
- ApiError: Error envelope returned by the Messages API
- DecodeError: Response payload does not match the expected shape
- CancellationError: Blocking call cancelled while waiting
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Statuses the service documents as transient.
_RETRYABLE_STATUSES: frozenset[int] = frozenset({408, 409, 429})


@dataclass
class ErrorContext:
    """Structured error context for diagnostics."""

    field_path: str | None = None
    """Path to the problematic field (e.g., 'messages[0].content')"""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'validation', 'transport', 'decode')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.field_path:
            parts.append(f"at '{self.field_path}'")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class ClientError(Exception):
    """Base class for all claude-client-python errors.

    Attributes:
        message: Human-readable error message
        context: Structured error context
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message


class ValidationError(ClientError):
    """Malformed request or message detected before sending.

    Raised when:
    - A request is frozen without messages
    - A message is frozen without content blocks
    - A text block is constructed without text
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        field: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="validation")
        if field:
            ctx.field_path = field
        super().__init__(message, ctx)
        self.field = field


class ConfigurationError(ClientError):
    """Invalid or incomplete client configuration."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        option: str | None = None,
        hint: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="configuration")
        if option:
            ctx.field_path = option
        if hint:
            ctx.hint = hint
        super().__init__(message, ctx)
        self.option = option


class IllegalStateError(ClientError):
    """Operation not permitted in the current state.

    Raised when a frozen builder is mutated or rebuilt, or when a blocking
    call is issued from the client's own event loop thread.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="state")
        super().__init__(message, ctx)


class TransportError(ClientError):
    """Error during HTTP transport.

    Raised when:
    - Network connection failure
    - Timeout
    - The remote service answers with a non-success status
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="transport")
        if url:
            ctx.details["url"] = url
        if status_code:
            ctx.details["status_code"] = status_code
        super().__init__(message, ctx)
        self.url = url
        self.status_code = status_code
        self.__cause__ = cause


class ApiError(TransportError):
    """Error envelope returned by the Messages API.

    Attributes:
        status_code: HTTP status code
        error_type: API error type (e.g. 'overloaded_error')
        raw_error: Parsed response body, if any
        request_id: Value of the request-id response header
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        error_type: str | None = None,
        raw_error: dict[str, Any] | None = None,
        request_id: str | None = None,
        url: str | None = None,
    ) -> None:
        ctx = ErrorContext(source="api")
        if error_type:
            ctx.details["error_type"] = error_type
        if request_id:
            ctx.details["request_id"] = request_id
        super().__init__(message, ctx, url=url, status_code=status_code)
        self.error_type = error_type
        self.raw_error = raw_error or {}
        self.request_id = request_id

    @property
    def retryable(self) -> bool:
        """Whether the service considers this status transient."""
        return self.status_code in _RETRYABLE_STATUSES or self.status_code >= 500

    @classmethod
    def from_response(
        cls,
        status_code: int,
        body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        url: str | None = None,
    ) -> ApiError:
        """Create ApiError from an HTTP error response.

        Args:
            status_code: HTTP status code
            body: Response body (parsed JSON)
            headers: Response headers
            url: Request URL

        Returns:
            ApiError carrying the envelope's type and message
        """
        error_type = None
        message = None
        if body:
            error = body.get("error")
            if isinstance(error, dict):
                error_type = error.get("type")
                message = error.get("message")

        request_id = None
        if headers:
            lowered = {k.lower(): v for k, v in headers.items()}
            request_id = lowered.get("request-id") or lowered.get("x-request-id")

        return cls(
            message or f"HTTP {status_code}",
            status_code=status_code,
            error_type=error_type,
            raw_error=body,
            request_id=request_id,
            url=url,
        )


class DecodeError(ClientError):
    """Response payload does not match the expected response shape."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        payload: bytes | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="decode")
        super().__init__(message, ctx)
        self.payload = payload
        self.__cause__ = cause


class CancellationError(ClientError):
    """A blocking call was cancelled while its caller was waiting."""

    def __init__(
        self,
        message: str = "blocking call cancelled",
        context: ErrorContext | None = None,
        *,
        reason: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="cancellation")
        if reason:
            ctx.details["reason"] = reason
        super().__init__(message, ctx)
        self.reason = reason
