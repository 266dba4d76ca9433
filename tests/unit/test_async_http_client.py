"""Unit tests for the awaitable AsyncHttpClient."""

import json
from unittest.mock import AsyncMock, MagicMock, call, patch

import httpx
import pytest

from shopify_rest_client.clients import AsyncHttpClient
from shopify_rest_client.exceptions import (
    HttpResponseError,
    InvalidHttpRequestError,
    MaxHttpRetriesExceededError,
)

SHOP = "test-shop.myshopify.com"
BASE_PATH = "/base_path"
ERROR_BODY = json.dumps({"errors": "Something very not good"}).encode()


@pytest.fixture
def build_client(session, config):
    def _build(transport, **kwargs):
        kwargs.setdefault("session", session)
        kwargs.setdefault("base_path", BASE_PATH)
        kwargs.setdefault("config", config)
        return AsyncHttpClient(transport=transport, **kwargs)

    return _build


@pytest.mark.asyncio
async def test_successful_request(
    build_client, make_async_transport, make_response, http_request, expected_headers
):
    transport = make_async_transport(make_response())

    response = await build_client(transport).request(http_request)

    assert response.ok
    assert response.body == {"success": True}
    sent = transport.calls[0]
    assert sent["method"] == "POST"
    assert sent["url"] == f"https://{SHOP}{BASE_PATH}/some-path?id=1234"
    assert sent["headers"] == expected_headers
    assert sent["body"] == b'{"foo": "bar"}'


@pytest.mark.asyncio
async def test_invalid_request_makes_no_attempt(
    build_client, make_async_transport, make_response, http_request
):
    http_request.tries = 0
    transport = make_async_transport(make_response())

    with pytest.raises(InvalidHttpRequestError):
        await build_client(transport).request(http_request)

    assert transport.calls == []


@pytest.mark.asyncio
async def test_throttle_then_success(
    build_client, make_async_transport, make_response, http_request
):
    http_request.tries = 2
    transport = make_async_transport(
        make_response(status_code=429, body=ERROR_BODY, headers={"Retry-After": "2.0"}),
        make_response(),
    )
    client = build_client(transport)

    with patch.object(client, "_wait", new_callable=AsyncMock) as wait:
        response = await client.request(http_request)

    wait.assert_awaited_once_with(2.0)
    assert response.ok
    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_retries_exceeded(
    build_client, make_async_transport, make_response, http_request
):
    http_request.tries = 3
    transport = make_async_transport(make_response(status_code=502, body=ERROR_BODY))
    client = build_client(transport)

    with patch.object(client, "_wait", new_callable=AsyncMock) as wait:
        with pytest.raises(MaxHttpRetriesExceededError) as exc_info:
            await client.request(http_request)

    assert wait.await_args_list == [call(1.0), call(1.0)]
    assert exc_info.value.attempts == 3
    assert len(transport.calls) == 3


@pytest.mark.asyncio
async def test_client_error_is_terminal(
    build_client, make_async_transport, make_response, http_request
):
    http_request.tries = 3
    transport = make_async_transport(make_response(status_code=422, body=ERROR_BODY))

    with pytest.raises(HttpResponseError) as exc_info:
        await build_client(transport).request(http_request)

    assert type(exc_info.value) is HttpResponseError
    assert exc_info.value.status_code == 422
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_transport_fault_propagates(
    build_client, make_async_transport, http_request
):
    http_request.tries = 3
    transport = make_async_transport(error=httpx.ReadTimeout("timed out"))

    with pytest.raises(httpx.ReadTimeout):
        await build_client(transport).request(http_request)

    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_wait_uses_asyncio_sleep(
    build_client, make_async_transport, make_response, http_request
):
    http_request.tries = 2
    transport = make_async_transport(
        make_response(status_code=500, body=ERROR_BODY), make_response()
    )

    with patch(
        "shopify_rest_client.clients.http_client.asyncio.sleep", new_callable=AsyncMock
    ) as sleep:
        await build_client(transport).request(http_request)

    sleep.assert_awaited_once_with(1.0)


@pytest.mark.asyncio
async def test_deprecation_warning_sink(
    build_client, make_async_transport, make_response, http_request
):
    transport = make_async_transport(
        make_response(headers={"X-Shopify-API-Deprecated-Reason": "going away"})
    )
    sink = MagicMock()

    await build_client(transport, warning_sink=sink).request(http_request)

    sink.assert_called_once_with(
        "Deprecated request to Shopify API at some-path, received reason: going away"
    )


@pytest.mark.asyncio
async def test_concurrent_calls_share_client(
    build_client, make_async_transport, make_response, http_request
):
    import asyncio

    transport = make_async_transport(make_response())
    client = build_client(transport)

    responses = await asyncio.gather(
        client.request(http_request), client.request(http_request)
    )

    assert all(r.ok for r in responses)
    assert len(transport.calls) == 2
