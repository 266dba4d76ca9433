import platform
import secrets
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from shopify_rest_client import __version__  # noqa: E402
from shopify_rest_client.auth import Session  # noqa: E402
from shopify_rest_client.config import HttpClientConfig  # noqa: E402
from shopify_rest_client.models import HttpRequest  # noqa: E402
from shopify_rest_client.utils.http import TransportResponse  # noqa: E402

SHOP = "test-shop.myshopify.com"
BASE_PATH = "/base_path"


def pytest_configure(config):
    # Register the asyncio marker so pytest doesn't warn when it's used.
    config.addinivalue_line(
        "markers", "asyncio: mark test to run in an asyncio event loop"
    )
    # Add custom markers for test organization
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Pin client settings for tests.

    Clears any ``SHOPIFY_*`` variables from the developer environment so
    defaults are deterministic, then sets the minimum used by tests.
    """
    for name in (
        "SHOPIFY_USER_AGENT_PREFIX",
        "SHOPIFY_RETRY_WAIT_SECONDS",
        "SHOPIFY_HTTP_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)

    monkeypatch.setenv("SHOPIFY_API_VERSION", "2024-10")
    monkeypatch.setenv("SHOPIFY_LOG_LEVEL", "INFO")

    yield


class FakeTransport:
    """In-memory transport returning queued responses in order.

    The last queued response is repeated once the queue runs dry. Every
    call is recorded in ``calls``.
    """

    def __init__(self, *responses: TransportResponse, error: Optional[Exception] = None):
        self.responses: List[TransportResponse] = list(responses)
        self.error = error
        self.calls: List[dict] = []

    def _next(self, method, url, headers, body) -> TransportResponse:
        self.calls.append(
            {"method": method, "url": url, "headers": dict(headers), "body": body}
        )
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    def execute(self, method, url, headers, body) -> TransportResponse:
        return self._next(method, url, headers, body)


class AsyncFakeTransport(FakeTransport):
    async def execute(self, method, url, headers, body) -> TransportResponse:
        return self._next(method, url, headers, body)


def wire_response(
    status_code: int = 200,
    body: bytes = b'{"success": true}',
    headers: Optional[dict] = None,
) -> TransportResponse:
    """Build a transport response with the default test headers."""
    merged = {"content-type": "application/json", "x-request-id": "123"}
    merged.update(headers or {})
    return TransportResponse(
        status_code=status_code, headers=list(merged.items()), body=body
    )


@pytest.fixture
def token():
    return secrets.token_urlsafe(10)


@pytest.fixture
def session(token):
    return Session(shop=SHOP, access_token=token)


@pytest.fixture
def config():
    return HttpClientConfig()


@pytest.fixture
def http_request():
    return HttpRequest(
        http_method="post",
        path="some-path",
        body={"foo": "bar"},
        body_type="application/json",
        query={"id": 1234},
        extra_headers={"extra": "header"},
    )


@pytest.fixture
def expected_headers(token):
    return {
        "Accept-Encoding": "gzip;q=1.0,deflate;q=0.6,identity;q=0.3",
        "User-Agent": (
            f"Shopify API Library v{__version__} | "
            f"Python {platform.python_version()}"
        ),
        "Content-Type": "application/json",
        "Accept": "application/json",
        "X-Shopify-Access-Token": token,
        "extra": "header",
    }


@pytest.fixture
def response_headers():
    return {"content-type": ["application/json"], "x-request-id": ["123"]}


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def make_async_transport():
    return AsyncFakeTransport


@pytest.fixture
def make_response():
    return wire_response
