"""Transport adapters performing single physical HTTP exchanges.

The request executor talks to the network only through the
:class:`Transport` / :class:`AsyncTransport` protocols: one call, one
exchange, no retries and no status handling. Connection level failures
are raised unchanged.

The bundled adapters wrap ``httpx.Client`` and ``httpx.AsyncClient``.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Protocol, Tuple

import httpx

logger = logging.getLogger(__name__)


@dataclass
class TransportResponse:
    """Raw result of one physical exchange.

    :param status_code: Status code exactly as received
    :param headers: Header name/value pairs; a name may repeat
    :param body: Response body bytes (content-encoding already removed)
    """

    status_code: int
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: bytes = b""


class Transport(Protocol):
    """Blocking transport contract consumed by :class:`HttpClient`."""

    def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> TransportResponse:
        ...


class AsyncTransport(Protocol):
    """Awaitable transport contract consumed by :class:`AsyncHttpClient`."""

    async def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> TransportResponse:
        ...


def create_timeout(
    connect: float = 5.0,
    read: float = 30.0,
    write: float = 10.0,
    pool: float = 5.0,
) -> httpx.Timeout:
    """Create a timeout configuration object.

    :param connect: Connection timeout in seconds
    :type connect: float
    :param read: Read timeout in seconds
    :type read: float
    :param write: Write timeout in seconds
    :type write: float
    :param pool: Pool timeout in seconds
    :type pool: float
    :return: Configured timeout object
    :rtype: httpx.Timeout
    """
    return httpx.Timeout(connect=connect, read=read, write=write, pool=pool)


def create_limits(
    max_keepalive_connections: int = 10,
    max_connections: int = 20,
    keepalive_expiry: float = 30.0,
) -> httpx.Limits:
    """Create a connection limits configuration object.

    :param max_keepalive_connections: Maximum number of keepalive connections
    :type max_keepalive_connections: int
    :param max_connections: Maximum total number of connections
    :type max_connections: int
    :param keepalive_expiry: Keepalive connection expiry time in seconds
    :type keepalive_expiry: float
    :return: Configured limits object
    :rtype: httpx.Limits
    """
    return httpx.Limits(
        max_keepalive_connections=max_keepalive_connections,
        max_connections=max_connections,
        keepalive_expiry=keepalive_expiry,
    )


def _to_transport_response(response: httpx.Response) -> TransportResponse:
    return TransportResponse(
        status_code=response.status_code,
        headers=list(response.headers.multi_items()),
        body=response.content,
    )


class HttpxTransport:
    """Blocking transport backed by ``httpx.Client``.

    :param client: Optional preconfigured client; one is created when omitted
    :param timeout: Timeout used when creating the client
    :param limits: Connection limits used when creating the client
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: Optional[httpx.Timeout] = None,
        limits: Optional[httpx.Limits] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout or create_timeout(),
            limits=limits or create_limits(),
        )

    def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> TransportResponse:
        response = self._client.request(method, url, headers=dict(headers), content=body)
        return _to_transport_response(response)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class AsyncHttpxTransport:
    """Awaitable transport backed by ``httpx.AsyncClient``.

    :param client: Optional preconfigured client; one is created when omitted
    :param timeout: Timeout used when creating the client
    :param limits: Connection limits used when creating the client
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[httpx.Timeout] = None,
        limits: Optional[httpx.Limits] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout or create_timeout(),
            limits=limits or create_limits(),
        )

    async def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> TransportResponse:
        response = await self._client.request(
            method, url, headers=dict(headers), content=body
        )
        return _to_transport_response(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
