"""Response classification for the retry engine.

Every physical response is reduced to an :class:`AttemptOutcome`. The
classifier is the only place that maps status codes to retry semantics;
the executor and scheduler only look at the outcome category.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Mapping, Optional, Sequence, Union

from .headers import DEPRECATION_HEADER

logger = logging.getLogger(__name__)

HeaderValues = Union[str, Sequence[str]]


class OutcomeCategory(str, Enum):
    """Categories a physical attempt can end in."""

    SUCCESS = "success"
    RETRIABLE_SERVER_ERROR = "retriable_server_error"
    RETRIABLE_THROTTLED = "retriable_throttled"
    NON_RETRIABLE_CLIENT_ERROR = "non_retriable_client_error"
    NON_RETRIABLE_SERVER_ERROR = "non_retriable_server_error"

    @property
    def is_retriable(self) -> bool:
        return self in (
            OutcomeCategory.RETRIABLE_SERVER_ERROR,
            OutcomeCategory.RETRIABLE_THROTTLED,
        )


@dataclass(frozen=True)
class AttemptOutcome:
    """Classified result of one physical attempt.

    :param category: Outcome category
    :param status_code: Raw status code of the attempt
    :param retry_after_seconds: Server wait hint, only set for throttled responses
    :param deprecation_reason: Text of the deprecation header, if present
    """

    category: OutcomeCategory
    status_code: int
    retry_after_seconds: Optional[float] = None
    deprecation_reason: Optional[str] = None

    @property
    def is_retriable(self) -> bool:
        return self.category.is_retriable


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Parse a ``Retry-After`` header value.

    Supports delta-seconds (fractional values allowed) and HTTP-date
    formats. Negative delays are clamped to zero; infinite and NaN values
    count as unparsable.

    :param value: Raw header value
    :type value: Optional[str]
    :return: Delay in seconds, or None when absent or unparsable
    :rtype: Optional[float]
    """
    retry_after = (value or "").strip()
    if not retry_after:
        return None

    try:
        delay = float(retry_after)
    except ValueError:
        pass
    else:
        if not math.isfinite(delay):
            logger.warning(f"Ignoring non-finite Retry-After header '{retry_after}'")
            return None
        logger.debug(f"Parsed Retry-After as delta-seconds: {delay}")
        return max(0.0, delay)

    try:
        retry_date = parsedate_to_datetime(retry_after)
        if retry_date.tzinfo is None:
            retry_date = retry_date.replace(tzinfo=timezone.utc)
        delay = (retry_date - datetime.now(retry_date.tzinfo)).total_seconds()
        logger.debug(f"Parsed Retry-After as HTTP-date: {delay}s")
        return max(0.0, delay)
    except (TypeError, ValueError) as e:
        logger.warning(f"Failed to parse Retry-After header '{retry_after}': {e}")
        return None


class ResponseClassifier:
    """Maps a status code and headers to an :class:`AttemptOutcome`."""

    def classify(
        self, status_code: int, headers: Mapping[str, HeaderValues]
    ) -> AttemptOutcome:
        """Classify one physical response.

        :param status_code: Raw status code
        :type status_code: int
        :param headers: Response headers, single values or value lists
        :type headers: Mapping[str, HeaderValues]
        :return: Classified outcome
        :rtype: AttemptOutcome
        """
        deprecation_reason = _first_header(headers, DEPRECATION_HEADER)
        retry_after = None

        if 200 <= status_code <= 299:
            category = OutcomeCategory.SUCCESS
        elif status_code == 429:
            category = OutcomeCategory.RETRIABLE_THROTTLED
            retry_after = parse_retry_after(_first_header(headers, "Retry-After"))
        elif 500 <= status_code <= 599:
            category = OutcomeCategory.RETRIABLE_SERVER_ERROR
        elif 400 <= status_code <= 499:
            category = OutcomeCategory.NON_RETRIABLE_CLIENT_ERROR
        else:
            category = OutcomeCategory.NON_RETRIABLE_SERVER_ERROR

        return AttemptOutcome(
            category=category,
            status_code=status_code,
            retry_after_seconds=retry_after,
            deprecation_reason=deprecation_reason,
        )


def _first_header(headers: Mapping[str, HeaderValues], name: str) -> Optional[str]:
    wanted = name.lower()
    for key, values in headers.items():
        if key.lower() != wanted:
            continue
        if isinstance(values, str):
            return values
        return values[0] if values else None
    return None
