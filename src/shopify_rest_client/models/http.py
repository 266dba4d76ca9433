"""Request and response models for the Shopify REST client.

:class:`HttpRequest` describes one logical call. It is validated once,
before the first physical attempt, and is never mutated by the client,
so every retried attempt is rebuilt from identical input.

:class:`HttpResponse` is the normalized result returned to callers:
parsed body plus headers collected as value lists.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple, Union
from urllib.parse import urlencode

from ..exceptions import InvalidHttpRequestError

logger = logging.getLogger(__name__)

JSON_BODY_TYPE = "application/json"
FORM_BODY_TYPE = "application/x-www-form-urlencoded"


class HttpMethod(str, Enum):
    """HTTP methods accepted by the client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: Any) -> Optional["HttpMethod"]:
        """Coerce a method name (any case) or member into a member.

        :param value: Candidate method
        :type value: Any
        :return: Matching member, or None when the value is not supported
        :rtype: Optional[HttpMethod]
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                return None
        return None


@dataclass
class HttpRequest:
    """Description of one logical API call.

    :param http_method: One of :class:`HttpMethod` (names are accepted)
    :param path: Resource path relative to the client's base path
    :param body: Optional payload; mappings and lists are serialized
                 according to ``body_type``, ``str``/``bytes`` are sent as is
    :param body_type: Mime type of the body, required when a body is given
    :param query: Optional query parameters
    :param extra_headers: Optional headers merged over the defaults
    :param tries: Maximum number of physical attempts (1 disables retries)
    """

    http_method: Union[HttpMethod, str]
    path: str
    body: Optional[Union[Dict[str, Any], List[Any], str, bytes]] = None
    body_type: Optional[str] = None
    query: Optional[Dict[str, Any]] = None
    extra_headers: Optional[Dict[str, Any]] = None
    tries: int = 1

    def verify(self) -> None:
        """Validate the request before any network activity.

        :raises InvalidHttpRequestError: If any attribute is invalid
        """
        if HttpMethod.parse(self.http_method) is None:
            raise InvalidHttpRequestError(
                f"Invalid method {self.http_method!r}, expected one of "
                f"{', '.join(m.value for m in HttpMethod)}",
                field="http_method",
            )
        if not isinstance(self.path, str) or not self.path.strip():
            raise InvalidHttpRequestError("Request path is required", field="path")
        if self.body is not None and not self.body_type:
            raise InvalidHttpRequestError(
                "Cannot set a body without also setting body_type", field="body_type"
            )
        if self.query is not None and not isinstance(self.query, Mapping):
            raise InvalidHttpRequestError("Query must be a mapping", field="query")
        if self.extra_headers is not None and not isinstance(
            self.extra_headers, Mapping
        ):
            raise InvalidHttpRequestError(
                "Extra headers must be a mapping", field="extra_headers"
            )
        if isinstance(self.tries, bool) or not isinstance(self.tries, int):
            raise InvalidHttpRequestError("Tries must be an integer", field="tries")
        if self.tries < 1:
            raise InvalidHttpRequestError("Tries must be at least 1", field="tries")

    @property
    def method(self) -> HttpMethod:
        """The request method as an :class:`HttpMethod` member.

        :raises InvalidHttpRequestError: If the method is not supported
        """
        method = HttpMethod.parse(self.http_method)
        if method is None:
            raise InvalidHttpRequestError(
                f"Invalid method {self.http_method!r}", field="http_method"
            )
        return method

    def serialized_body(self) -> Optional[bytes]:
        """Serialize the body according to ``body_type``.

        :return: Wire bytes, or None when the request has no body
        :rtype: Optional[bytes]
        """
        if self.body is None:
            return None
        if isinstance(self.body, bytes):
            return self.body
        if isinstance(self.body, str):
            return self.body.encode("utf-8")

        media_type = (self.body_type or "").split(";", 1)[0].strip().lower()
        if media_type == FORM_BODY_TYPE and isinstance(self.body, Mapping):
            return urlencode(self.body, doseq=True).encode("utf-8")
        if media_type != JSON_BODY_TYPE and not media_type.endswith("+json"):
            logger.debug(
                f"Serializing structured body as JSON for body_type {self.body_type}"
            )
        return json.dumps(self.body).encode("utf-8")

    def query_string(self) -> str:
        """Encode the query parameters as a standard query string.

        :return: Encoded query string without the leading ``?``
        :rtype: str
        """
        if not self.query:
            return ""
        return urlencode(list(_flatten_query(self.query)), doseq=True)


def _flatten_query(query: Mapping) -> Iterable[Tuple[str, Any]]:
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = str(value).lower()
        yield str(key), value


class ApiCallLimit(NamedTuple):
    """Parsed ``X-Shopify-Shop-Api-Call-Limit`` header."""

    used: int
    limit: int


@dataclass
class HttpResponse:
    """Normalized response returned by the client.

    :param code: HTTP status code of the attempt that ended the call
    :param headers: Lower-case header name mapped to the list of its values
    :param body: Parsed body; ``{}`` when the server sent no content
    """

    code: int
    headers: Dict[str, List[str]] = field(default_factory=dict)
    body: Any = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True if the status code is in the 2xx range."""
        return 200 <= self.code <= 299

    def header(self, name: str) -> Optional[str]:
        """Return the first value of a header, or None.

        :param name: Header name (case-insensitive)
        :type name: str
        :return: First header value if present
        :rtype: Optional[str]
        """
        values = self.headers.get(name.lower())
        return values[0] if values else None

    @property
    def request_id(self) -> Optional[str]:
        return self.header("x-request-id")

    @property
    def api_call_limit(self) -> Optional[ApiCallLimit]:
        """Leaky-bucket usage reported by the shop, if any."""
        raw = self.header("x-shopify-shop-api-call-limit")
        if not raw:
            return None
        try:
            used, limit = raw.split("/", 1)
            return ApiCallLimit(int(used), int(limit))
        except ValueError:
            logger.debug(f"Ignoring malformed API call limit header: {raw!r}")
            return None

    @property
    def retry_request_after(self) -> Optional[float]:
        """Seconds the server asked clients to wait, if any."""
        from ..utils.http.classifier import parse_retry_after

        return parse_retry_after(self.header("retry-after"))

    @classmethod
    def from_wire(
        cls, code: int, headers: Iterable[Tuple[str, str]], content: bytes
    ) -> "HttpResponse":
        """Build a normalized response from raw transport data.

        :param code: Raw status code
        :type code: int
        :param headers: Header name/value pairs, names may repeat
        :type headers: Iterable[Tuple[str, str]]
        :param content: Raw (decoded) body bytes
        :type content: bytes
        :return: Normalized response
        :rtype: HttpResponse
        """
        collected: Dict[str, List[str]] = {}
        for name, value in headers:
            collected.setdefault(name.lower(), []).append(value)
        content_type = (collected.get("content-type") or [""])[0]
        return cls(code=code, headers=collected, body=parse_body(content, content_type))


def parse_body(content: bytes, content_type: str = "") -> Any:
    """Parse a response body into a structured value.

    Empty bodies parse to ``{}``. Bodies that are not valid JSON are
    returned as decoded text.

    :param content: Raw body bytes
    :type content: bytes
    :param content_type: Value of the response Content-Type header
    :type content_type: str
    :return: Parsed JSON, ``{}``, or text
    :rtype: Any
    """
    if not content or not content.strip():
        return {}
    text = content.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        if "json" in content_type.lower():
            logger.warning("Response declared JSON but could not be parsed")
        return text
