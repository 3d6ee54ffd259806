"""Tests for the Anthropic facade and the messages namespace."""

import json
import threading
from decimal import Decimal

import pytest

from claude_client import (
    Anthropic,
    ApiError,
    DecodeError,
    IllegalStateError,
    Message,
    MessageResponse,
    Model,
    Role,
    StopReason,
    Text,
    TransportError,
    Usage,
    ValidationError,
)
from claude_client.client import MESSAGES_ENDPOINT
from claude_client.telemetry import get_log_context
from claude_client.transport import TransportResponse
from claude_client.types import Cost, ModelSpec

EXPECTED = MessageResponse(
    id="msg_1",
    role=Role.ASSISTANT,
    content=[Text("Hello!")],
    model="test-model",
    stop_reason=StopReason.END_TURN,
    usage=Usage(input_tokens=3, output_tokens=2),
)


def hi_claude(r):
    r.model("test-model").message(lambda m: m.role(Role.USER).text("Hi Claude"))


def _json_response(status, body, headers=None):
    return TransportResponse(status, json.dumps(body).encode(), headers or {})


class TestCreate:
    """Happy path through both calling styles."""

    def test_create_blocking(self, make_client, stub_transport) -> None:
        client = make_client(stub_transport)
        response = client.messages.create_blocking(hi_claude)
        assert response == EXPECTED
        assert response.text == "Hello!"

    @pytest.mark.asyncio
    async def test_create(self, make_client, stub_transport) -> None:
        client = make_client(stub_transport)
        response = await client.messages.create(hi_claude)
        assert response == EXPECTED

    @pytest.mark.asyncio
    async def test_sync_and_async_agree(self, make_client, stub_factory) -> None:
        async_stub, blocking_stub = stub_factory(), stub_factory()
        async_result = await make_client(async_stub).messages.create(hi_claude)
        blocking_result = make_client(blocking_stub).messages.create_blocking(hi_claude)

        assert async_result == blocking_result
        assert async_stub.requests[0][1] == blocking_stub.requests[0][1]

    def test_send_prebuilt_request(self, make_client, stub_transport) -> None:
        client = make_client(stub_transport)
        request = client.build_request(lambda r: r.user("Hi"))
        assert client.messages.send_blocking(request) == EXPECTED

    def test_request_on_the_wire(self, make_client, stub_transport) -> None:
        client = make_client(stub_transport, beta="prompt-caching-2024-07-31")
        client.messages.create_blocking(
            lambda r: r.system("Be brief.").user("one").assistant("two").user("three")
        )

        endpoint, _, headers = stub_transport.requests[0]
        assert endpoint == MESSAGES_ENDPOINT
        assert headers["x-api-key"] == "sk-ant-test-key"
        assert headers["anthropic-version"] == "2023-06-01"
        assert headers["anthropic-beta"] == "prompt-caching-2024-07-31"
        assert headers["content-type"] == "application/json"

        payload = stub_transport.last_payload()
        assert payload["model"] == Model.default().value
        assert payload["max_tokens"] == Model.default().max_output
        assert payload["system"] == [{"type": "text", "text": "Be brief."}]
        assert payload["messages"] == [
            {"role": "user", "content": [{"type": "text", "text": "one"}]},
            {"role": "assistant", "content": [{"type": "text", "text": "two"}]},
            {"role": "user", "content": [{"type": "text", "text": "three"}]},
        ]
        assert "temperature" not in payload

    def test_client_defaults_flow_into_requests(self, make_client, stub_transport) -> None:
        client = make_client(
            stub_transport, default_model=Model.CLAUDE_3_HAIKU_20240307, default_max_tokens=99
        )
        client.messages.create_blocking(lambda r: r.user("Hi"))
        payload = stub_transport.last_payload()
        assert payload["model"] == "claude-3-haiku-20240307"
        assert payload["max_tokens"] == 99

    def test_concurrent_blocking_callers(self, make_client, stub_transport) -> None:
        client = make_client(stub_transport)
        results: list[MessageResponse] = []
        lock = threading.Lock()

        def call() -> None:
            response = client.messages.create_blocking(lambda r: r.user("Hi"))
            with lock:
                results.append(response)

        threads = [threading.Thread(target=call) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert results == [EXPECTED] * 8
        assert client.usage.input_tokens == 24
        assert client.usage.output_tokens == 16

    @pytest.mark.asyncio
    async def test_log_context_is_cleared(self, make_client, stub_transport) -> None:
        client = make_client(stub_transport)
        await client.messages.create(lambda r: r.user("Hi"))
        assert get_log_context().request_id is None


class TestErrors:
    """Errors reach the caller unchanged on both paths."""

    def test_validation_before_transport(self, make_client, stub_transport) -> None:
        client = make_client(stub_transport)
        with pytest.raises(ValidationError, match="messages required"):
            client.messages.create_blocking(lambda r: r.model("test-model"))
        assert stub_transport.requests == []

    @pytest.mark.asyncio
    async def test_validation_before_transport_async(self, make_client, stub_transport) -> None:
        client = make_client(stub_transport)
        with pytest.raises(ValidationError):
            await client.messages.create(lambda r: r.messages(Message(role=Role.USER)))
        assert stub_transport.requests == []

    def test_transport_error_identity_blocking(self, make_client, stub_factory) -> None:
        error = TransportError("Connection failed", url="http://localhost")
        client = make_client(stub_factory(error=error))
        with pytest.raises(TransportError) as exc_info:
            client.messages.create_blocking(lambda r: r.user("Hi"))
        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_transport_error_identity_async(self, make_client, stub_factory) -> None:
        error = TransportError("Connection failed", url="http://localhost")
        client = make_client(stub_factory(error=error))
        with pytest.raises(TransportError) as exc_info:
            await client.messages.create(lambda r: r.user("Hi"))
        assert exc_info.value is error

    def test_api_error_envelope(self, make_client, stub_factory) -> None:
        body = {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}}
        stub = stub_factory(_json_response(529, body, {"request-id": "req_42"}))
        client = make_client(stub)

        with pytest.raises(ApiError) as exc_info:
            client.messages.create_blocking(lambda r: r.user("Hi"))

        error = exc_info.value
        assert isinstance(error, TransportError)
        assert error.status_code == 529
        assert error.error_type == "overloaded_error"
        assert error.message == "Overloaded"
        assert error.request_id == "req_42"
        assert error.retryable
        assert error.url.endswith(MESSAGES_ENDPOINT)

    @pytest.mark.asyncio
    async def test_api_error_async(self, make_client, stub_factory) -> None:
        body = {"type": "error", "error": {"type": "invalid_request_error", "message": "bad"}}
        client = make_client(stub_factory(_json_response(400, body)))
        with pytest.raises(ApiError) as exc_info:
            await client.messages.create(lambda r: r.user("Hi"))
        assert exc_info.value.error_type == "invalid_request_error"
        assert not exc_info.value.retryable

    def test_non_json_error_body(self, make_client, stub_factory) -> None:
        client = make_client(stub_factory(TransportResponse(502, b"<html>Bad Gateway</html>")))
        with pytest.raises(ApiError, match="HTTP 502") as exc_info:
            client.messages.create_blocking(lambda r: r.user("Hi"))
        assert exc_info.value.error_type is None

    def test_malformed_response(self, make_client, stub_factory) -> None:
        client = make_client(stub_factory(TransportResponse(200, b"not json")))
        with pytest.raises(DecodeError):
            client.messages.create_blocking(lambda r: r.user("Hi"))
        assert client.usage == Usage.ZERO

    def test_unknown_content_type_in_response(self, make_client, stub_factory) -> None:
        body = {
            "id": "msg_2",
            "role": "assistant",
            "content": [{"type": "hologram", "data": "?"}],
            "usage": {"input_tokens": 1, "output_tokens": 1},
        }
        client = make_client(stub_factory(_json_response(200, body)))
        with pytest.raises(DecodeError):
            client.messages.create_blocking(lambda r: r.user("Hi"))


class TestUsageAndLifecycle:
    """Usage accounting and closing."""

    def test_usage_accumulates(self, make_client, stub_transport) -> None:
        client = make_client(stub_transport)
        client.messages.create_blocking(lambda r: r.user("one"))
        client.messages.create_blocking(lambda r: r.user("two"))
        assert client.usage.input_tokens == 6
        assert client.usage.output_tokens == 4
        # test-model has no known pricing
        assert client.cost.total == Decimal(0)

    def test_cost_for_known_model(self, make_client, stub_factory) -> None:
        body = {
            "id": "msg_3",
            "role": "assistant",
            "content": [{"type": "text", "text": "ok"}],
            "model": "claude-3-5-sonnet-latest",
            "usage": {"input_tokens": 1_000_000, "output_tokens": 1_000_000},
        }
        client = make_client(stub_factory(_json_response(200, body)))
        client.messages.create_blocking(lambda r: r.user("Hi"))
        assert client.cost.total == Decimal(18)

    def test_cost_for_custom_model(self, make_client, stub_factory) -> None:
        body = {
            "id": "msg_4",
            "role": "assistant",
            "content": [{"type": "text", "text": "ok"}],
            "model": "claude-sonnet-4-0",
            "usage": {"input_tokens": 1_000_000, "output_tokens": 2_000_000},
        }
        spec = ModelSpec(200_000, 64_000, Cost.per_million("3", "15"))
        client = make_client(
            stub_factory(_json_response(200, body)), models={"claude-sonnet-4-0": spec}
        )
        client.messages.create_blocking(lambda r: r.user("Hi"))
        assert client.cost.input_tokens == Decimal(3)
        assert client.cost.output_tokens == Decimal(30)
        assert client.cost.total == Decimal(33)

    def test_proxy_reaches_http_transport(self, clean_env) -> None:
        client = Anthropic.create(lambda c: c.api_key("sk-ant-x").proxy("http://proxy:8080"))
        try:
            assert client._transport.proxy == "http://proxy:8080"
        finally:
            client.close_blocking()

    def test_repr(self, make_client, stub_transport) -> None:
        client = make_client(stub_transport)
        client.messages.create_blocking(lambda r: r.user("Hi"))
        text = repr(client)
        assert text.startswith("Anthropic(usage=")
        assert "sk-ant-test-key" not in text

    def test_close_blocking_then_call_fails(self, make_client, stub_transport) -> None:
        client = make_client(stub_transport)
        client.messages.create_blocking(lambda r: r.user("Hi"))
        client.close_blocking()
        assert stub_transport.close_calls == 1
        with pytest.raises(IllegalStateError, match="closed"):
            client.messages.create_blocking(lambda r: r.user("Hi"))

    def test_context_manager(self, clean_env, stub_transport) -> None:
        with Anthropic.create(lambda c: c.api_key("sk-ant-x"), transport=stub_transport) as client:
            assert client.messages.create_blocking(lambda r: r.user("Hi")) == EXPECTED
        assert stub_transport.close_calls >= 1

    @pytest.mark.asyncio
    async def test_async_context_manager(self, clean_env, stub_transport) -> None:
        async with Anthropic.create(
            lambda c: c.api_key("sk-ant-x"), transport=stub_transport
        ) as client:
            assert await client.messages.create(lambda r: r.user("Hi")) == EXPECTED
        assert stub_transport.close_calls >= 1

    def test_create_uses_environment_key(self, api_key_env, stub_transport) -> None:
        client = Anthropic.create(transport=stub_transport)
        try:
            client.messages.create_blocking(lambda r: r.user("Hi"))
            assert stub_transport.requests[0][2]["x-api-key"] == api_key_env
        finally:
            client.close_blocking()
