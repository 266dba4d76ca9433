"""Retry decisions for the request executor.

The scheduler answers one question after every attempt: stop, try again
after some wait, or give up because the attempt budget is spent. The
wait is either the server hint (throttled responses only) or the fixed
backoff from :class:`HttpClientConfig`; it does not grow across attempts.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ...config.settings import HttpClientConfig
from .classifier import AttemptOutcome, OutcomeCategory

logger = logging.getLogger(__name__)


class RetryAction(str, Enum):
    """What the executor should do after an attempt."""

    STOP = "stop"
    RETRY = "retry"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class RetryDecision:
    """Scheduler verdict for one attempt.

    :param action: Next step for the executor
    :param wait_seconds: Delay before the next attempt, 0 unless retrying
    """

    action: RetryAction
    wait_seconds: float = 0.0


class RetryScheduler:
    """Decides whether and when another physical attempt is made."""

    def __init__(self, config: Optional[HttpClientConfig] = None) -> None:
        self.config = config or HttpClientConfig()

    @property
    def default_wait_seconds(self) -> float:
        return self.config.retry_wait_seconds

    def decide(
        self, attempt: int, max_attempts: int, outcome: AttemptOutcome
    ) -> RetryDecision:
        """Decide the next step after attempt number ``attempt``.

        :param attempt: 1-based index of the attempt just made
        :type attempt: int
        :param max_attempts: Attempt budget of the logical call
        :type max_attempts: int
        :param outcome: Classified outcome of the attempt
        :type outcome: AttemptOutcome
        :return: Scheduler verdict
        :rtype: RetryDecision
        """
        if not outcome.is_retriable:
            return RetryDecision(RetryAction.STOP)

        if attempt >= max_attempts:
            logger.debug(
                f"Attempt budget spent after {attempt}/{max_attempts} "
                f"({outcome.category.value})"
            )
            return RetryDecision(RetryAction.EXHAUSTED)

        wait = self.default_wait_seconds
        if (
            outcome.category is OutcomeCategory.RETRIABLE_THROTTLED
            and outcome.retry_after_seconds is not None
        ):
            wait = outcome.retry_after_seconds

        return RetryDecision(RetryAction.RETRY, wait_seconds=wait)
