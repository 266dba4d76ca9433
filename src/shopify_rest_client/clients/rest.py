"""Convenience client for the Admin REST API.

:class:`RestAdminClient` pins the ``/admin/api/<version>`` base path and
offers one method per HTTP verb. Every call goes through
:class:`HttpClient`, so validation, retries and error handling are the
same as for hand-built :class:`HttpRequest` objects.
"""

from typing import Any, Dict, Optional

from ..auth.session import SessionProvider
from ..config.settings import HttpClientConfig, Settings
from ..models.http import JSON_BODY_TYPE, HttpMethod, HttpRequest, HttpResponse
from ..utils.http.transport import Transport
from .http_client import HttpClient


class RestAdminClient:
    """Verb helpers over the versioned Admin REST API.

    :param session: Provider of the shop host and optional access token
    :param api_version: Admin API version; taken from :class:`Settings`
                        when omitted
    :param http_client: Executor to use; built from the other arguments
                        when omitted
    :param config: Executor configuration for a newly built executor
    :param transport: Transport for a newly built executor
    """

    def __init__(
        self,
        session: SessionProvider,
        api_version: Optional[str] = None,
        http_client: Optional[HttpClient] = None,
        config: Optional[HttpClientConfig] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        settings = None
        if not api_version:
            settings = Settings()
            api_version = settings.api_version
        self.api_version = api_version
        self.http_client = http_client or HttpClient(
            session=session,
            base_path=f"/admin/api/{self.api_version}",
            config=config,
            transport=transport,
            settings=settings,
        )

    def get(
        self,
        path: str,
        query: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, Any]] = None,
        tries: int = 1,
    ) -> HttpResponse:
        return self._request(
            HttpMethod.GET, path, query=query, extra_headers=extra_headers, tries=tries
        )

    def delete(
        self,
        path: str,
        query: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, Any]] = None,
        tries: int = 1,
    ) -> HttpResponse:
        return self._request(
            HttpMethod.DELETE,
            path,
            query=query,
            extra_headers=extra_headers,
            tries=tries,
        )

    def post(
        self,
        path: str,
        body: Dict[str, Any],
        query: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, Any]] = None,
        tries: int = 1,
    ) -> HttpResponse:
        return self._request(
            HttpMethod.POST,
            path,
            body=body,
            query=query,
            extra_headers=extra_headers,
            tries=tries,
        )

    def put(
        self,
        path: str,
        body: Dict[str, Any],
        query: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, Any]] = None,
        tries: int = 1,
    ) -> HttpResponse:
        return self._request(
            HttpMethod.PUT,
            path,
            body=body,
            query=query,
            extra_headers=extra_headers,
            tries=tries,
        )

    def _request(
        self,
        method: HttpMethod,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, Any]] = None,
        tries: int = 1,
    ) -> HttpResponse:
        request = HttpRequest(
            http_method=method,
            path=json_path(path),
            body=body,
            body_type=JSON_BODY_TYPE if body is not None else None,
            query=query,
            extra_headers=extra_headers,
            tries=tries,
        )
        return self.http_client.request(request)

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self) -> "RestAdminClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def json_path(path: str) -> str:
    """Normalize a resource path to ``<path>.json`` without a leading slash.

    :param path: Resource path, e.g. ``/products/123`` or ``products.json``
    :type path: str
    :return: Normalized path
    :rtype: str
    """
    path = (path or "").strip().lstrip("/")
    if not path:
        return path
    if path.endswith(".json"):
        path = path[: -len(".json")]
    return f"{path}.json"
