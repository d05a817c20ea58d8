import httpx
import pytest

from insight_worker.services.transport import GenerationOptions, build_payload, send

from conftest import CHAT_PROVIDER, chat_body, json_handler, mock_client, request_json


def test_payload_is_single_user_message_without_streaming():
    payload = build_payload(CHAT_PROVIDER, "hello", GenerationOptions())
    assert payload == {
        "model": "chat-model",
        "stream": False,
        "messages": [{"role": "user", "content": "hello"}],
    }


def test_payload_carries_sampling_options_when_set():
    payload = build_payload(CHAT_PROVIDER, "hello", GenerationOptions(temperature=0.3, max_tokens=1000))
    assert payload["temperature"] == 0.3
    assert payload["max_tokens"] == 1000


@pytest.mark.asyncio
async def test_successful_call_returns_parsed_body():
    seen = []
    async with mock_client(json_handler(chat_body("Hi"), seen=seen)) as client:
        result = await send(CHAT_PROVIDER, "prompt text", GenerationOptions(), client=client)

    assert result.ok
    assert result.response == chat_body("Hi")
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == CHAT_PROVIDER.endpoint
    assert request.headers["Authorization"] == "Bearer secret"
    assert request.headers["Content-Type"] == "application/json"
    assert request_json(request)["messages"][0]["content"] == "prompt text"


@pytest.mark.asyncio
async def test_timeout_is_reported_not_raised():
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    async with mock_client(handler) as client:
        result = await send(CHAT_PROVIDER, "p", GenerationOptions(timeout=0.1), client=client)
    assert not result.ok
    assert result.error.kind == "timeout"
    assert result.response is None


@pytest.mark.asyncio
async def test_connection_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_client(handler) as client:
        result = await send(CHAT_PROVIDER, "p", GenerationOptions(), client=client)
    assert result.error.kind == "network"
    assert "connection refused" in result.error.detail


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 401, 429, 500, 503])
async def test_non_success_status_carries_code_and_body(status):
    async with mock_client(json_handler({"error": {"message": "nope"}}, status_code=status)) as client:
        result = await send(CHAT_PROVIDER, "p", GenerationOptions(), client=client)
    assert result.error.kind == f"http-status:{status}"
    assert "nope" in result.error.detail


@pytest.mark.asyncio
async def test_non_json_body_is_invalid_body():
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    async with mock_client(handler) as client:
        result = await send(CHAT_PROVIDER, "p", GenerationOptions(), client=client)
    assert result.error.kind == "invalid-body"


@pytest.mark.asyncio
async def test_any_json_shape_is_passed_through():
    async with mock_client(json_handler(["unexpected", "list"])) as client:
        result = await send(CHAT_PROVIDER, "p", GenerationOptions(), client=client)
    assert result.ok
    assert result.response == ["unexpected", "list"]
