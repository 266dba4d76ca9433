"""HTTP utilities public API (barrel module).

This package provides:
- Header composition for outgoing requests
- Response classification into retry outcome categories
- The retry scheduler
- Transport adapters over httpx

Recommended import pattern for consumers:
    from shopify_rest_client.utils.http import HeaderComposer, RetryScheduler

This keeps call sites stable even if internal modules are reorganized.
"""

from .classifier import (
    AttemptOutcome,
    OutcomeCategory,
    ResponseClassifier,
    parse_retry_after,
)
from .headers import ACCESS_TOKEN_HEADER, DEPRECATION_HEADER, HeaderComposer
from .retry import RetryAction, RetryDecision, RetryScheduler
from .transport import (
    AsyncHttpxTransport,
    AsyncTransport,
    HttpxTransport,
    Transport,
    TransportResponse,
    create_limits,
    create_timeout,
)

__all__ = [
    "ACCESS_TOKEN_HEADER",
    "DEPRECATION_HEADER",
    "HeaderComposer",
    "AttemptOutcome",
    "OutcomeCategory",
    "ResponseClassifier",
    "parse_retry_after",
    "RetryAction",
    "RetryDecision",
    "RetryScheduler",
    "Transport",
    "AsyncTransport",
    "TransportResponse",
    "HttpxTransport",
    "AsyncHttpxTransport",
    "create_timeout",
    "create_limits",
]
