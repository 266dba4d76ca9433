"""Request executor for the Shopify Admin REST API.

This module turns a logical :class:`HttpRequest` into one or more
physical attempts and returns exactly one terminal result: a normalized
:class:`HttpResponse` or a typed error.

Each attempt walks the same states::

    BUILDING -> SENDING -> CLASSIFYING -> SUCCEEDED
                                       -> FAILED
                                       -> RETRYING -> BUILDING

Header composition, classification and retry decisions are delegated to
:class:`HeaderComposer`, :class:`ResponseClassifier` and
:class:`RetryScheduler`. The only suspension point is :meth:`_wait`,
which blocks in :class:`HttpClient` and awaits in :class:`AsyncHttpClient`.

Examples:
    >>> session = Session(shop="test-shop.myshopify.com", access_token="...")
    >>> with HttpClient(session=session, base_path="/admin/api/2024-10") as client:
    ...     response = client.request(
    ...         HttpRequest(http_method="GET", path="products.json", tries=3)
    ...     )
"""

import asyncio
import json
import logging
import time
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Union

from ..auth.session import SessionProvider
from ..config.settings import HttpClientConfig, Settings
from ..exceptions import (
    HttpResponseError,
    MaxHttpRetriesExceededError,
    ShopifyApiDeprecationWarning,
)
from ..models.http import HttpRequest, HttpResponse
from ..utils.http.classifier import OutcomeCategory, ResponseClassifier
from ..utils.http.headers import HeaderComposer
from ..utils.http.retry import RetryAction, RetryDecision, RetryScheduler
from ..utils.http.transport import (
    AsyncHttpxTransport,
    AsyncTransport,
    HttpxTransport,
    Transport,
    TransportResponse,
    create_timeout,
)
from ..utils.security import sanitize_headers

logger = logging.getLogger(__name__)

WarningSink = Callable[[str], None]


class ExecutionState(str, Enum):
    """States of one logical call."""

    BUILDING = "building"
    SENDING = "sending"
    CLASSIFYING = "classifying"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class PreparedRequest:
    """Wire-ready form of one physical attempt."""

    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[bytes]


class _BaseHttpClient:
    """Shared building, classification and decision logic.

    :param session: Provider of the shop host and optional access token
    :param base_path: Path prefix placed between the host and request paths
    :param config: Executor configuration; loaded from :class:`Settings`
                   when omitted
    :param warning_sink: Callable receiving deprecation messages
    """

    def __init__(
        self,
        session: SessionProvider,
        base_path: str = "",
        config: Optional[HttpClientConfig] = None,
        warning_sink: Optional[WarningSink] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.session = session
        self.base_path = _normalize_base_path(base_path)
        self._settings = settings
        self.config = config or self.settings.client_config()
        self.header_composer = HeaderComposer(self.config)
        self.classifier = ResponseClassifier()
        self.scheduler = RetryScheduler(self.config)
        self._warning_sink = warning_sink or _default_warning_sink

    @property
    def settings(self) -> Settings:
        """Environment settings, loaded on first use."""
        if self._settings is None:
            self._settings = Settings()
        return self._settings

    def warn(self, message: str) -> None:
        """Forward a deprecation message to the warning sink."""
        self._warning_sink(message)

    def _transition(
        self, state: ExecutionState, request: HttpRequest, attempt: int
    ) -> None:
        logger.debug(
            f"{request.path} attempt {attempt}/{request.tries}: {state.value}"
        )

    def _url(self, request: HttpRequest) -> str:
        path = request.path.strip().lstrip("/")
        url = f"https://{self.session.host_for_requests()}{self.base_path}/{path}"
        query = request.query_string()
        if query:
            url = f"{url}?{query}"
        return url

    def _prepare(self, request: HttpRequest, attempt: int) -> PreparedRequest:
        self._transition(ExecutionState.BUILDING, request, attempt)
        prepared = PreparedRequest(
            method=request.method.value,
            url=self._url(request),
            headers=self.header_composer.compose(
                request, self.session.credential_or_absent()
            ),
            body=request.serialized_body(),
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"=== SEND: {prepared.method} {prepared.url}")
            logger.debug(f"    Headers: {sanitize_headers(prepared.headers)}")
        return prepared

    def _settle(
        self, request: HttpRequest, attempt: int, raw: TransportResponse
    ) -> Union[HttpResponse, RetryDecision]:
        """Classify an attempt and return the response or a retry decision.

        :raises HttpResponseError: On a terminal non-successful status
        :raises MaxHttpRetriesExceededError: When retries are exhausted
        """
        self._transition(ExecutionState.CLASSIFYING, request, attempt)
        response = HttpResponse.from_wire(raw.status_code, raw.headers, raw.body)
        outcome = self.classifier.classify(raw.status_code, response.headers)

        if outcome.deprecation_reason:
            self.warn(
                f"Deprecated request to Shopify API at {request.path}, "
                f"received reason: {outcome.deprecation_reason}"
            )

        if outcome.category is OutcomeCategory.SUCCESS:
            self._transition(ExecutionState.SUCCEEDED, request, attempt)
            if attempt > 1:
                logger.info(f"Success after {attempt} attempts for {request.path}")
            return response

        decision = self.scheduler.decide(attempt, request.tries, outcome)
        if decision.action is RetryAction.RETRY:
            if outcome.category is OutcomeCategory.RETRIABLE_THROTTLED:
                logger.info(f"Throttled (429) on {request.path}")
            logger.info(
                f"Retry {attempt}/{request.tries} after "
                f"{decision.wait_seconds:.2f}s for {request.path} "
                f"(status {response.code})"
            )
            return decision

        self._transition(ExecutionState.FAILED, request, attempt)
        error_message = serialized_error(response)
        if decision.action is RetryAction.EXHAUSTED and request.tries > 1:
            logger.error(
                f"Request to {request.path} failed after {attempt} attempts "
                f"(status {response.code})"
            )
            raise MaxHttpRetriesExceededError(
                f"Exceeded maximum retry count of {request.tries}. "
                f"Last message: {error_message}",
                response=response,
                attempts=attempt,
            )
        logger.debug(f"Request to {request.path} failed with status {response.code}")
        raise HttpResponseError(error_message, response=response)

    def _log_transport_failure(self, prepared: PreparedRequest, error: Exception) -> None:
        logger.error(
            f"Transport failure for {prepared.method} {prepared.url}: "
            f"{type(error).__name__}: {error}"
        )


class HttpClient(_BaseHttpClient):
    """Blocking request executor.

    :param session: Provider of the shop host and optional access token
    :param base_path: Path prefix placed between the host and request paths
    :param config: Executor configuration; loaded from :class:`Settings`
                   when omitted
    :param transport: Transport performing physical exchanges; an
                      :class:`HttpxTransport` is created when omitted
    :param warning_sink: Callable receiving deprecation messages
    """

    def __init__(
        self,
        session: SessionProvider,
        base_path: str = "",
        config: Optional[HttpClientConfig] = None,
        transport: Optional[Transport] = None,
        warning_sink: Optional[WarningSink] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        super().__init__(
            session,
            base_path=base_path,
            config=config,
            warning_sink=warning_sink,
            settings=settings,
        )
        self._owns_transport = transport is None
        self.transport: Transport = transport or HttpxTransport(
            timeout=create_timeout(read=self.settings.http_timeout_seconds)
        )

    def request(self, request: HttpRequest) -> HttpResponse:
        """Execute a logical call, retrying per ``request.tries``.

        :param request: Logical request
        :type request: HttpRequest
        :return: Normalized response of the successful attempt
        :rtype: HttpResponse
        :raises InvalidHttpRequestError: If the request fails validation
        :raises HttpResponseError: On a terminal non-successful status
        :raises MaxHttpRetriesExceededError: When retries are exhausted
        """
        request.verify()
        attempt = 0
        while True:
            attempt += 1
            prepared = self._prepare(request, attempt)
            raw = self._send(prepared, request, attempt)
            result = self._settle(request, attempt, raw)
            if isinstance(result, HttpResponse):
                return result
            self._transition(ExecutionState.RETRYING, request, attempt)
            self._wait(result.wait_seconds)

    def _send(
        self, prepared: PreparedRequest, request: HttpRequest, attempt: int
    ) -> TransportResponse:
        self._transition(ExecutionState.SENDING, request, attempt)
        try:
            return self.transport.execute(
                prepared.method, prepared.url, prepared.headers, prepared.body
            )
        except Exception as e:
            self._log_transport_failure(prepared, e)
            raise

    def _wait(self, seconds: float) -> None:
        time.sleep(seconds)

    def close(self) -> None:
        if self._owns_transport and hasattr(self.transport, "close"):
            self.transport.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class AsyncHttpClient(_BaseHttpClient):
    """Awaitable request executor.

    Same semantics as :class:`HttpClient`; the transport is awaited and
    the wait between attempts uses ``asyncio.sleep``.
    """

    def __init__(
        self,
        session: SessionProvider,
        base_path: str = "",
        config: Optional[HttpClientConfig] = None,
        transport: Optional[AsyncTransport] = None,
        warning_sink: Optional[WarningSink] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        super().__init__(
            session,
            base_path=base_path,
            config=config,
            warning_sink=warning_sink,
            settings=settings,
        )
        self._owns_transport = transport is None
        self.transport: AsyncTransport = transport or AsyncHttpxTransport(
            timeout=create_timeout(read=self.settings.http_timeout_seconds)
        )

    async def request(self, request: HttpRequest) -> HttpResponse:
        """Execute a logical call, retrying per ``request.tries``.

        :param request: Logical request
        :type request: HttpRequest
        :return: Normalized response of the successful attempt
        :rtype: HttpResponse
        :raises InvalidHttpRequestError: If the request fails validation
        :raises HttpResponseError: On a terminal non-successful status
        :raises MaxHttpRetriesExceededError: When retries are exhausted
        """
        request.verify()
        attempt = 0
        while True:
            attempt += 1
            prepared = self._prepare(request, attempt)
            raw = await self._send(prepared, request, attempt)
            result = self._settle(request, attempt, raw)
            if isinstance(result, HttpResponse):
                return result
            self._transition(ExecutionState.RETRYING, request, attempt)
            await self._wait(result.wait_seconds)

    async def _send(
        self, prepared: PreparedRequest, request: HttpRequest, attempt: int
    ) -> TransportResponse:
        self._transition(ExecutionState.SENDING, request, attempt)
        try:
            return await self.transport.execute(
                prepared.method, prepared.url, prepared.headers, prepared.body
            )
        except Exception as e:
            self._log_transport_failure(prepared, e)
            raise

    async def _wait(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def aclose(self) -> None:
        if self._owns_transport and hasattr(self.transport, "aclose"):
            await self.transport.aclose()

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def serialized_error(response: HttpResponse) -> str:
    """Build the error message for a failed response.

    Collects the API's error fields and, when the response carries a
    request id, a reference callers can quote to support.

    :param response: Failed response
    :type response: HttpResponse
    :return: JSON encoded error description
    :rtype: str
    """
    payload: Dict[str, object] = {}
    body = response.body
    if isinstance(body, dict):
        for key in ("errors", "error", "error_description"):
            if key in body:
                payload[key] = body[key]
    elif body:
        payload["errors"] = body
    if response.request_id:
        payload["error_reference"] = (
            "If you report this error, please include this ID: "
            f"{response.request_id}."
        )
    return json.dumps(payload)


def _normalize_base_path(base_path: Optional[str]) -> str:
    path = (base_path or "").strip().strip("/")
    return f"/{path}" if path else ""


def _default_warning_sink(message: str) -> None:
    logger.warning(message)
    warnings.warn(message, ShopifyApiDeprecationWarning, stacklevel=5)
