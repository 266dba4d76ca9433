"""Unit tests for request header composition."""

import platform

from shopify_rest_client import __version__
from shopify_rest_client.config import HttpClientConfig
from shopify_rest_client.models import HttpRequest
from shopify_rest_client.utils.http import ACCESS_TOKEN_HEADER, HeaderComposer


def test_defaults_only_for_bare_request():
    composer = HeaderComposer(HttpClientConfig())
    headers = composer.compose(HttpRequest(http_method="GET", path="shop.json"))

    assert headers == {
        "User-Agent": f"Shopify API Library v{__version__} | Python {platform.python_version()}",
        "Accept-Encoding": "gzip;q=1.0,deflate;q=0.6,identity;q=0.3",
        "Accept": "application/json",
    }


def test_body_adds_content_type_and_extra_headers_merge():
    composer = HeaderComposer()
    request = HttpRequest(
        http_method="POST",
        path="products.json",
        body={"product": {"title": "Hat"}},
        body_type="application/json",
        extra_headers={"extra": "header"},
    )

    headers = composer.compose(request)

    assert headers["Content-Type"] == "application/json"
    assert headers["extra"] == "header"


def test_no_content_type_without_body():
    composer = HeaderComposer()
    request = HttpRequest(
        http_method="GET", path="products.json", body_type="application/json"
    )

    headers = composer.compose(request)

    assert "Content-Type" not in headers
    assert headers["Accept"] == "application/json"


def test_credential_header_only_when_present():
    composer = HeaderComposer()
    request = HttpRequest(http_method="GET", path="shop.json")

    assert ACCESS_TOKEN_HEADER not in composer.compose(request, None)
    assert ACCESS_TOKEN_HEADER not in composer.compose(request, "")
    assert composer.compose(request, "shpat_abc")[ACCESS_TOKEN_HEADER] == "shpat_abc"


def test_extra_headers_override_defaults_case_insensitively():
    composer = HeaderComposer()
    request = HttpRequest(
        http_method="GET",
        path="shop.json",
        extra_headers={"accept": "text/csv", "X-Custom": 5},
    )

    headers = composer.compose(request)

    assert headers["accept"] == "text/csv"
    assert "Accept" not in headers
    assert headers["X-Custom"] == "5"


def test_user_agent_prefix():
    config = HttpClientConfig(user_agent_prefix="My App")
    headers = HeaderComposer(config).compose(HttpRequest(http_method="GET", path="x"))

    assert headers["User-Agent"].startswith("My App | Shopify API Library v")


def test_none_extra_header_values_are_skipped():
    composer = HeaderComposer()
    request = HttpRequest(
        http_method="GET",
        path="shop.json",
        extra_headers={"X-Optional": None, "Accept": None, "X-Present": "1"},
    )

    headers = composer.compose(request)

    assert "X-Optional" not in headers
    assert headers["Accept"] == "application/json"
    assert headers["X-Present"] == "1"
