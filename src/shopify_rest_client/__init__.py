"""Shopify REST client package.

This package provides a small HTTP client for a shop's Admin REST API. It
composes canonical request headers, serializes request bodies, normalizes
responses, and applies a bounded retry policy for throttled (429) and
transient server (5xx) responses.

:var __version__: Current package version
:type __version__: str
"""

__version__ = "0.1.0"

from .auth import Session, SessionProvider
from .clients import AsyncHttpClient, HttpClient, RestAdminClient
from .config import HttpClientConfig, Settings
from .exceptions import (
    HttpResponseError,
    InvalidHttpRequestError,
    MaxHttpRetriesExceededError,
    ShopifyApiDeprecationWarning,
    ShopifyClientError,
)
from .models import HttpMethod, HttpRequest, HttpResponse
from .utils.security import setup_secure_logging

__all__ = [
    "__version__",
    "Session",
    "SessionProvider",
    "HttpClient",
    "AsyncHttpClient",
    "RestAdminClient",
    "HttpClientConfig",
    "Settings",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "ShopifyClientError",
    "InvalidHttpRequestError",
    "HttpResponseError",
    "MaxHttpRetriesExceededError",
    "ShopifyApiDeprecationWarning",
    "setup_secure_logging",
]
