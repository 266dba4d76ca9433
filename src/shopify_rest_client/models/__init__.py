"""Request and response models."""

from .http import (
    FORM_BODY_TYPE,
    JSON_BODY_TYPE,
    ApiCallLimit,
    HttpMethod,
    HttpRequest,
    HttpResponse,
    parse_body,
)

__all__ = [
    "FORM_BODY_TYPE",
    "JSON_BODY_TYPE",
    "ApiCallLimit",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "parse_body",
]
