"""Structured exception classes for the Shopify REST client."""

import json
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .models.http import HttpResponse


class ShopifyClientError(Exception):
    """Base exception for all Shopify REST client errors.

    This exception serves as the parent class for all client specific
    exceptions, providing a consistent interface for error handling
    across the package.

    :param message: Human-readable error message
    :param code: Optional error code for programmatic handling
    :param details: Optional dictionary containing additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the exception with message, code, and details."""
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format.

        :return: Dictionary containing error code, message, and details
        """
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        """Convert exception to JSON string.

        :return: JSON-encoded string representation of the exception
        """
        return json.dumps(self.to_dict())


class InvalidHttpRequestError(ShopifyClientError):
    """Raised when a request description fails validation.

    Validation happens before any network activity, so no physical
    attempt has been made when this is raised.

    :param message: Description of the validation failure
    :param field: Optional name of the request attribute that is invalid
    """

    def __init__(self, message: str, field: Optional[str] = None):
        """Initialize invalid request error with message and optional field."""
        details = {}
        if field:
            details["field"] = field
        super().__init__(message=message, code="INVALID_HTTP_REQUEST", details=details)
        self.field = field


class HttpResponseError(ShopifyClientError):
    """Raised when the API answers with a terminal, non-successful status.

    :param message: Description of the failure, usually the serialized
                    error body returned by the API
    :param response: The normalized response of the failing attempt
    """

    def __init__(self, message: str, response: "HttpResponse"):
        """Initialize response error with message and the failing response."""
        details: Dict[str, Any] = {"status_code": response.code}
        if response.request_id:
            details["request_id"] = response.request_id
        super().__init__(message=message, code="HTTP_RESPONSE_ERROR", details=details)
        self.response = response

    @property
    def status_code(self) -> int:
        """HTTP status code of the failing response."""
        return self.response.code

    @property
    def body(self) -> Any:
        """Parsed body of the failing response."""
        return self.response.body


class MaxHttpRetriesExceededError(HttpResponseError):
    """Raised when every allowed attempt ended in a retriable failure.

    :param message: Description including the last error message
    :param response: The normalized response of the last attempt
    :param attempts: Number of physical attempts that were made
    """

    def __init__(self, message: str, response: "HttpResponse", attempts: int):
        """Initialize retries exceeded error with the last response."""
        super().__init__(message=message, response=response)
        self.code = "MAX_HTTP_RETRIES_EXCEEDED"
        self.details["attempts"] = attempts
        self.attempts = attempts


class ShopifyApiDeprecationWarning(FutureWarning):
    """Issued when the API flags a requested endpoint as deprecated."""
