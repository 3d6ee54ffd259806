"""Core client implementation.

The Anthropic facade owns the configuration, the transport, the blocking
bridge and the usage collector; the ``messages`` namespace exposes the
asynchronous and blocking calls.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from claude_client.client.blocking import BlockingBridge
from claude_client.client.builder import MessageRequestBuilder, build_config, build_request
from claude_client.client.usage import UsageCollector
from claude_client.errors import ApiError
from claude_client.telemetry import LogContext, clear_log_context, get_logger, set_log_context
from claude_client.transport import (
    HttpTransport,
    decode_error_body,
    decode_response,
    encode_request,
    get_auth_headers,
)

if TYPE_CHECKING:
    from claude_client.client.builder import ClientConfigBuilder
    from claude_client.client.cancel import CancelToken
    from claude_client.client.config import ClientConfig
    from claude_client.transport import Transport
    from claude_client.types.message import MessageRequest
    from claude_client.types.model import Cost
    from claude_client.types.response import MessageResponse, Usage

logger = get_logger(__name__)

MESSAGES_ENDPOINT = "/v1/messages"

RequestConfigurer = Callable[[MessageRequestBuilder], Any]


class Messages:
    """The ``messages`` namespace of a client.

    Example:
        >>> response = await client.messages.create(lambda r: r.user("Hi Claude"))
        >>> response = client.messages.create_blocking(
        ...     lambda r: r.message(lambda m: m.role(Role.USER).text("Hi Claude"))
        ... )
    """

    def __init__(self, client: Anthropic) -> None:
        self._client = client

    async def create(self, configure: RequestConfigurer) -> MessageResponse:
        """Build a request through the DSL and send it.

        Args:
            configure: Callback populating a MessageRequestBuilder

        Returns:
            The decoded MessageResponse

        Raises:
            ValidationError: If the request is malformed
            TransportError: On network failure or a non-success status
            DecodeError: If the response does not have the expected shape
        """
        request = self._client.build_request(configure)
        return await self.send(request)

    async def send(self, request: MessageRequest) -> MessageResponse:
        """Send an already built request."""
        return await self._client._execute(request)

    def create_blocking(
        self,
        configure: RequestConfigurer,
        *,
        cancel: CancelToken | None = None,
    ) -> MessageResponse:
        """Blocking variant of create().

        The request is built in the calling thread; the call then runs on
        the client's event loop thread while this thread waits.

        Args:
            configure: Callback populating a MessageRequestBuilder
            cancel: Optional token releasing the caller when cancelled

        Returns:
            The same response create() would return

        Raises:
            CancellationError: If interrupted or cancelled while waiting
            ClientError: Any error create() would raise, unchanged
        """
        request = self._client.build_request(configure)
        return self.send_blocking(request, cancel=cancel)

    def send_blocking(
        self,
        request: MessageRequest,
        *,
        cancel: CancelToken | None = None,
    ) -> MessageResponse:
        """Blocking variant of send()."""
        return self._client._bridge.run(self.send(request), cancel=cancel)


class Anthropic:
    """Client for the Messages API.

    Example:
        >>> client = Anthropic.create(lambda c: c.api_key("sk-ant-...").timeout(30))
        >>> response = await client.messages.create(
        ...     lambda r: r.model("claude-3-5-haiku-latest").user("Hi Claude")
        ... )
        >>> print(response.text)

        >>> # Synchronous callers
        >>> with Anthropic.create() as client:
        ...     response = client.messages.create_blocking(lambda r: r.user("Hi"))
    """

    def __init__(self, config: ClientConfig, *, transport: Transport | None = None) -> None:
        """Initialize the client.

        Use Anthropic.create() for construction through the config DSL.
        """
        self._config = config
        self._transport: Transport = transport or HttpTransport(
            config.base_url, timeout=config.timeout, proxy=config.proxy
        )
        self._headers = {
            "content-type": "application/json",
            "accept": "application/json",
            **get_auth_headers(
                config.api_key, config.anthropic_version, config.anthropic_beta
            ),
        }
        self._bridge = BlockingBridge()
        self._usage = UsageCollector(config.models)
        self.messages = Messages(self)

    @classmethod
    def create(
        cls,
        configure: Callable[[ClientConfigBuilder], Any] | None = None,
        *,
        transport: Transport | None = None,
    ) -> Anthropic:
        """Create a client from a configuration callback.

        Args:
            configure: Callback populating a ClientConfigBuilder
            transport: Transport to use instead of HttpTransport

        Raises:
            ConfigurationError: If no API key is configured or discoverable
        """
        return cls(build_config(configure), transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def usage(self) -> Usage:
        """Token usage accumulated over all calls."""
        return self._usage.usage

    @property
    def cost(self) -> Cost:
        """Cost accumulated over calls to models with known pricing."""
        return self._usage.cost

    def build_request(self, configure: RequestConfigurer) -> MessageRequest:
        """Build a request with this client's default model and max tokens."""
        return build_request(
            configure,
            model=self._config.default_model,
            max_tokens=self._config.default_max_tokens,
        )

    async def _execute(self, request: MessageRequest) -> MessageResponse:
        payload = encode_request(request)
        set_log_context(LogContext(request_id=str(uuid.uuid4()), model=request.model))
        try:
            logger.debug("Sending message request", messages=len(request.messages))
            result = await self._transport.send(MESSAGES_ENDPOINT, payload, self._headers)

            if not result.is_success:
                error = ApiError.from_response(
                    status_code=result.status,
                    body=decode_error_body(result.body),
                    headers=dict(result.headers),
                    url=f"{self._config.base_url}{MESSAGES_ENDPOINT}",
                )
                logger.debug(
                    "Message request failed",
                    status=result.status,
                    error_type=error.error_type,
                )
                raise error

            response = decode_response(result.body)
            self._usage.record(response)
            logger.debug(
                "Message response received",
                message_id=response.id,
                stop_reason=response.stop_reason.value if response.stop_reason else None,
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            )
            return response
        finally:
            clear_log_context()

    async def close(self) -> None:
        """Close the transport and stop the blocking bridge."""
        await self._transport.close()
        await asyncio.to_thread(self._bridge.shutdown, self._transport.close)

    def close_blocking(self) -> None:
        """Synchronous close() for callers without an event loop."""
        self._bridge.shutdown(self._transport.close)

    async def __aenter__(self) -> Anthropic:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def __enter__(self) -> Anthropic:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close_blocking()

    def __repr__(self) -> str:
        return f"Anthropic(usage={self.usage!r}, cost={self.cost!r})"
