"""Shop session model consumed by the HTTP client.

The client only reads from a session: it asks for the host to send
requests to and for an optional access token. Nothing in the request
path mutates a session, so one session can be shared by concurrent
logical calls.
"""

from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator


@runtime_checkable
class SessionProvider(Protocol):
    """Read-only view of a session required by the request executor."""

    def host_for_requests(self) -> str:
        """Return the shop host requests are sent to."""
        ...

    def credential_or_absent(self) -> Optional[str]:
        """Return the access token, or None when the session has none."""
        ...


class Session(BaseModel):
    """Shop session holding the host and an optional access token.

    :param shop: Shop host, e.g. ``test-shop.myshopify.com``. A leading
                 scheme and trailing slashes are stripped.
    :type shop: str
    :param access_token: Optional Admin API access token
    :type access_token: Optional[str]
    """

    model_config = ConfigDict(frozen=True)

    shop: str
    access_token: Optional[str] = Field(None, repr=False)

    @field_validator("shop")
    @classmethod
    def normalize_shop(cls, v: str) -> str:
        """Normalize the shop host.

        :param v: Raw shop value
        :type v: str
        :return: Bare host name
        :rtype: str
        :raises ValueError: If the shop is empty
        """
        host = v.strip()
        for scheme in ("https://", "http://"):
            if host.lower().startswith(scheme):
                host = host[len(scheme) :]
        host = host.rstrip("/")
        if not host:
            raise ValueError("shop must not be empty")
        return host

    def host_for_requests(self) -> str:
        return self.shop

    def credential_or_absent(self) -> Optional[str]:
        if self.access_token and self.access_token.strip():
            return self.access_token
        return None
