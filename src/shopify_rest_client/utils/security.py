"""Log sanitization and secure logging setup.

Access tokens travel in request headers, and request headers are dumped
at DEBUG level by the HTTP client. Everything here exists so those dumps
and any other log line never carry a usable credential.
"""

import logging
import re
import sys
from typing import Any, Dict, Mapping, Optional

from ..config.settings import Settings

# Patterns for sensitive data detection
SENSITIVE_PATTERNS = {
    "shopify_token": re.compile(r"\bshp(at|ca|pa|ss)_[A-Za-z0-9]+"),
    "access_token_header": re.compile(
        r"(x-shopify-access-token['\"]?\s*[:=]\s*['\"]?)[^'\"\s,}]+", re.IGNORECASE
    ),
    "bearer_token": re.compile(r"Bearer\s+[A-Za-z0-9._-]+", re.IGNORECASE),
}

# Headers that should never be logged
SENSITIVE_HEADERS = {
    "x-shopify-access-token",
    "authorization",
    "cookie",
    "set-cookie",
}


def sanitize_string(value: str) -> str:
    """Redact credentials embedded in a string.

    :param value: String to sanitize
    :type value: str
    :return: String with sensitive fragments replaced
    :rtype: str
    """
    if not value:
        return value
    value = SENSITIVE_PATTERNS["access_token_header"].sub(r"\1<REDACTED>", value)
    value = SENSITIVE_PATTERNS["shopify_token"].sub("<shopify_token:REDACTED>", value)
    value = SENSITIVE_PATTERNS["bearer_token"].sub("Bearer <REDACTED>", value)
    return value


def sanitize_headers(headers: Mapping[str, Any]) -> Dict[str, Any]:
    """Sanitize HTTP headers for logging.

    :param headers: Mapping of HTTP headers
    :type headers: Mapping[str, Any]
    :return: Copy of the headers with sensitive values redacted
    :rtype: Dict[str, Any]
    """
    sanitized: Dict[str, Any] = {}
    for key, value in (headers or {}).items():
        if key.lower() in SENSITIVE_HEADERS:
            if isinstance(value, str) and value:
                sanitized[key] = f"<REDACTED:length={len(value)}>"
            else:
                sanitized[key] = "<REDACTED>"
        elif isinstance(value, str):
            sanitized[key] = sanitize_string(value)
        else:
            sanitized[key] = value
    return sanitized


class SanitizingFormatter(logging.Formatter):
    """Formatter that redacts credentials from every formatted record."""

    def format(self, record: logging.LogRecord) -> str:
        return sanitize_string(super().format(record))


# Global flag to track if logging has been set up
_LOGGING_CONFIGURED = False


def setup_secure_logging(level: Optional[str] = None, force: bool = False) -> None:
    """Set up root logging with automatic credential redaction.

    Repeated calls are ignored unless ``force`` is set.

    :param level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
                  defaults to ``Settings().log_level``
    :type level: Optional[str]
    :param force: Reconfigure even if logging was already set up
    :type force: bool
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED and not force:
        logging.getLogger(__name__).debug(
            "Logging already configured, skipping duplicate setup"
        )
        return

    if level is None:
        level = Settings().log_level

    formatter = SanitizingFormatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[handler],
        force=True,
    )

    # httpx logs full request lines at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
