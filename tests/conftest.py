"""Root pytest fixtures for claude-client-python tests."""

from __future__ import annotations

import asyncio
import json
import threading
from collections.abc import Callable, Iterator, Mapping
from typing import Any

import pytest

from claude_client.client import Anthropic
from claude_client.transport import TransportResponse

CANNED_RESPONSE: dict[str, Any] = {
    "id": "msg_1",
    "type": "message",
    "role": "assistant",
    "content": [{"type": "text", "text": "Hello!"}],
    "model": "test-model",
    "stop_reason": "end_turn",
    "stop_sequence": None,
    "usage": {"input_tokens": 3, "output_tokens": 2},
}


class StubTransport:
    """Deterministic in-memory transport.

    Returns ``response``, raises ``error``, or with ``hang`` waits until the
    calling task is cancelled.
    """

    def __init__(
        self,
        response: TransportResponse | None = None,
        error: Exception | None = None,
        hang: bool = False,
    ) -> None:
        self.response = response or TransportResponse(200, json.dumps(CANNED_RESPONSE).encode())
        self.error = error
        self.hang = hang
        self.requests: list[tuple[str, bytes, dict[str, str]]] = []
        self.started = threading.Event()
        self.cancelled = threading.Event()
        self.close_calls = 0

    async def send(
        self,
        endpoint: str,
        payload: bytes,
        headers: Mapping[str, str],
    ) -> TransportResponse:
        self.requests.append((endpoint, payload, dict(headers)))
        self.started.set()
        if self.hang:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled.set()
                raise
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self) -> None:
        self.close_calls += 1

    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1][1])


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables the client reads."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_BASE_URL", raising=False)


@pytest.fixture
def api_key_env(monkeypatch: pytest.MonkeyPatch, clean_env: None) -> str:
    """Provide an API key through the environment."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env-key")
    return "sk-ant-env-key"


@pytest.fixture
def stub_transport() -> StubTransport:
    return StubTransport()


@pytest.fixture
def stub_factory() -> type[StubTransport]:
    """The StubTransport class, for tests needing custom behaviour."""
    return StubTransport


@pytest.fixture
def make_client(clean_env: None) -> Iterator[Callable[..., Anthropic]]:
    """Factory for clients over a given transport; closes them afterwards."""
    clients: list[Anthropic] = []

    def factory(transport: Any, **options: Any) -> Anthropic:
        def configure(config: Any) -> None:
            config.api_key("sk-ant-test-key")
            for name, value in options.items():
                getattr(config, name)(value)

        client = Anthropic.create(configure, transport=transport)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close_blocking()
