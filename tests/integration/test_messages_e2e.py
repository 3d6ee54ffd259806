"""End-to-end tests over the httpx transport with mocked HTTP."""

import json

import pytest
from pytest_httpx import HTTPXMock

from claude_client import Anthropic, ApiError, Role

BASE_URL = "http://localhost:4010"

RESPONSE = {
    "id": "msg_1",
    "type": "message",
    "role": "assistant",
    "content": [{"type": "text", "text": "Hello!"}],
    "model": "claude-3-5-haiku-latest",
    "stop_reason": "end_turn",
    "stop_sequence": None,
    "usage": {"input_tokens": 3, "output_tokens": 2},
}


@pytest.fixture
def client(clean_env):
    client = Anthropic.create(
        lambda c: c.api_key("sk-ant-e2e").base_url(BASE_URL).timeout(5)
    )
    yield client
    client.close_blocking()


def _hi(r):
    r.model("claude-3-5-haiku-latest").message(lambda m: m.role(Role.USER).text("Hi Claude"))


def test_create_blocking(client: Anthropic, httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(
        method="POST",
        url=f"{BASE_URL}/v1/messages",
        match_headers={"x-api-key": "sk-ant-e2e", "anthropic-version": "2023-06-01"},
        json=RESPONSE,
    )

    response = client.messages.create_blocking(_hi)

    assert response.text == "Hello!"
    assert client.usage.input_tokens == 3
    assert client.cost.total > 0

    sent = json.loads(httpx_mock.get_request().content)
    assert sent["messages"] == [
        {"role": "user", "content": [{"type": "text", "text": "Hi Claude"}]}
    ]


@pytest.mark.asyncio
async def test_create_and_create_blocking_agree(
    client: Anthropic, httpx_mock: HTTPXMock
) -> None:
    httpx_mock.add_response(url=f"{BASE_URL}/v1/messages", json=RESPONSE)
    httpx_mock.add_response(url=f"{BASE_URL}/v1/messages", json=RESPONSE)

    async_response = await client.messages.create(_hi)
    blocking_response = client.messages.create_blocking(_hi)

    assert async_response == blocking_response
    first, second = httpx_mock.get_requests()
    assert first.content == second.content

    await client.close()


def test_api_error(client: Anthropic, httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(
        url=f"{BASE_URL}/v1/messages",
        status_code=401,
        json={"type": "error", "error": {"type": "authentication_error", "message": "invalid x-api-key"}},
        headers={"request-id": "req_401"},
    )

    with pytest.raises(ApiError) as exc_info:
        client.messages.create_blocking(_hi)

    assert exc_info.value.status_code == 401
    assert exc_info.value.error_type == "authentication_error"
    assert exc_info.value.request_id == "req_401"
    assert not exc_info.value.retryable
