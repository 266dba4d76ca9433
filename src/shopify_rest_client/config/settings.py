"""Configuration settings for the Shopify REST client.

This module defines two layers of configuration:

- :class:`HttpClientConfig` is the explicit, immutable configuration
  struct handed to the header composer and the retry scheduler. It owns
  the default header table and the fixed retry backoff.
- :class:`Settings` loads process configuration from environment
  variables (``SHOPIFY_*``) and ``.env`` files and produces an
  :class:`HttpClientConfig`.
"""

import platform
import re
from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_API_VERSION_PATTERN = re.compile(r"^(\d{4}-\d{2}|unstable)$")


class HttpClientConfig(BaseModel):
    """Immutable configuration consumed by the request executor.

    :param user_agent_prefix: Optional application name placed in front of
                              the library User-Agent
    :type user_agent_prefix: Optional[str]
    :param retry_wait_seconds: Fixed wait between retried attempts when the
                               server supplies no hint
    :type retry_wait_seconds: float
    :param accept: Value of the default ``Accept`` header
    :type accept: str
    :param accept_encoding: Value of the default ``Accept-Encoding`` header
    :type accept_encoding: str
    """

    model_config = ConfigDict(frozen=True)

    user_agent_prefix: Optional[str] = None
    retry_wait_seconds: float = Field(1.0, gt=0)
    accept: str = "application/json"
    accept_encoding: str = "gzip;q=1.0,deflate;q=0.6,identity;q=0.3"

    @property
    def user_agent(self) -> str:
        """Build the transport-identifying User-Agent string.

        :return: User-Agent header value
        :rtype: str
        """
        from .. import __version__

        agent = (
            f"Shopify API Library v{__version__} | "
            f"Python {platform.python_version()}"
        )
        if self.user_agent_prefix:
            agent = f"{self.user_agent_prefix} | {agent}"
        return agent

    def default_headers(self) -> Dict[str, str]:
        """Return the fixed default headers sent with every attempt.

        :return: Mapping of canonical header name to value
        :rtype: Dict[str, str]
        """
        return {
            "User-Agent": self.user_agent,
            "Accept-Encoding": self.accept_encoding,
            "Accept": self.accept,
        }


class Settings(BaseSettings):
    """Client settings loaded from environment variables.

    Every field can be set through a ``SHOPIFY_``-prefixed environment
    variable (for example ``SHOPIFY_RETRY_WAIT_SECONDS=2``) or a ``.env``
    file in the working directory.

    :param api_version: Admin API version used by the REST convenience client
    :type api_version: str
    :param user_agent_prefix: Optional prefix for the User-Agent header
    :type user_agent_prefix: Optional[str]
    :param retry_wait_seconds: Default wait between retried attempts
    :type retry_wait_seconds: float
    :param http_timeout_seconds: Timeout applied by the bundled httpx transports
    :type http_timeout_seconds: float
    :param log_level: Logging level for :func:`setup_secure_logging`
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_prefix="SHOPIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_version: str = Field("2024-10", description="Admin API version")
    user_agent_prefix: Optional[str] = Field(
        None, description="Application name prepended to the User-Agent"
    )
    retry_wait_seconds: float = Field(
        1.0, gt=0, description="Fixed backoff between retried attempts"
    )
    http_timeout_seconds: float = Field(
        30.0, gt=0, description="Timeout for the bundled httpx transports"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )

    @field_validator("api_version")
    @classmethod
    def validate_api_version(cls, v: str) -> str:
        """Ensure the API version looks like ``YYYY-MM`` or ``unstable``.

        :param v: Raw API version value
        :type v: str
        :return: Stripped API version
        :rtype: str
        :raises ValueError: If the value has an unexpected shape
        """
        v = v.strip()
        if not _API_VERSION_PATTERN.match(v):
            raise ValueError(
                f"Invalid API version '{v}', expected 'YYYY-MM' or 'unstable'"
            )
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    def client_config(self) -> HttpClientConfig:
        """Build the executor configuration from these settings.

        :return: Immutable client configuration
        :rtype: HttpClientConfig
        """
        return HttpClientConfig(
            user_agent_prefix=self.user_agent_prefix,
            retry_wait_seconds=self.retry_wait_seconds,
        )
