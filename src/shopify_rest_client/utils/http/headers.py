"""Header composition for outgoing requests.

Headers for one physical attempt are merged in a fixed precedence, later
layers overriding earlier ones on a case-insensitive key collision:

1. Default headers from :class:`HttpClientConfig`
2. ``Content-Type`` from the request body type, only when a body is present
3. The access token header, only when the session carries a credential
4. Caller supplied ``extra_headers``
"""

from typing import Any, Dict, Mapping, Optional

from ...config.settings import HttpClientConfig
from ...models.http import HttpRequest

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"
DEPRECATION_HEADER = "X-Shopify-API-Deprecated-Reason"


class HeaderComposer:
    """Builds the physical header set for a request attempt."""

    def __init__(self, config: Optional[HttpClientConfig] = None) -> None:
        self.config = config or HttpClientConfig()

    def compose(
        self, request: HttpRequest, credential: Optional[str] = None
    ) -> Dict[str, str]:
        """Compose headers for one attempt of ``request``.

        :param request: Logical request being sent
        :type request: HttpRequest
        :param credential: Access token from the session, if any
        :type credential: Optional[str]
        :return: Header mapping with canonical casing
        :rtype: Dict[str, str]
        """
        headers: Dict[str, str] = {}
        _merge(headers, self.config.default_headers())

        if request.body is not None and request.body_type:
            _merge(headers, {"Content-Type": request.body_type})

        if credential:
            _merge(headers, {ACCESS_TOKEN_HEADER: credential})

        if request.extra_headers:
            _merge(headers, request.extra_headers)

        return headers


def _merge(target: Dict[str, str], layer: Mapping[str, Any]) -> None:
    """Merge ``layer`` into ``target``, replacing keys case-insensitively.

    ``None`` values are skipped.
    """
    for name, value in layer.items():
        if value is None:
            continue
        name = str(name)
        for existing in [k for k in target if k.lower() == name.lower()]:
            del target[existing]
        target[name] = str(value)
