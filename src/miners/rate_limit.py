"""
GitHub Rate Limit Strategy.

Decides what the miner does when GitHub rejects a request because of a rate
limit. The strategy is injected into the miner so the behaviour is chosen per
miner instance instead of being process-wide state.

Two kinds of limits are recognised:
- primary: the hourly quota is exhausted (``x-ratelimit-remaining: 0``)
- secondary: abuse detection, usually announced with ``retry-after``
"""

import time
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Optional

from github import RateLimitExceededException

from config import logger


class PrimaryLimitAction(Enum):
    """Action taken when the primary quota is exhausted."""

    SLEEP_UNTIL_RESET = "sleep-until-reset"
    ABORT = "abort"


class SecondaryLimitAction(Enum):
    """Action taken when a secondary rate limit is hit."""

    SLEEP_TOTAL_DURATION = "sleep-total-duration"
    ABORT = "abort"


class RateLimitKind(Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


class RateLimitStrategy:
    """
    Handle ``RateLimitExceededException`` raised by PyGithub.

    ``handle`` either sleeps for the required duration, so the caller can
    repeat the failed request, or re-raises the exception.

    Attributes:
        on_primary_limit (PrimaryLimitAction): Primary limit action.
        on_secondary_limit (SecondaryLimitAction): Secondary limit action.
        secondary_wait_seconds (float): Wait used when no Retry-After is sent.
        max_secondary_sleep_seconds (Optional[float]): Cap on the accumulated
            secondary sleep; exceeding it re-raises.
        total_secondary_sleep (float): Seconds slept on secondary limits so far.
    """

    def __init__(
        self,
        on_primary_limit: PrimaryLimitAction = PrimaryLimitAction.SLEEP_UNTIL_RESET,
        on_secondary_limit: SecondaryLimitAction = SecondaryLimitAction.SLEEP_TOTAL_DURATION,
        secondary_wait_seconds: float = 60,
        max_secondary_sleep_seconds: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.on_primary_limit = PrimaryLimitAction(on_primary_limit)
        self.on_secondary_limit = SecondaryLimitAction(on_secondary_limit)
        self.secondary_wait_seconds = secondary_wait_seconds
        self.max_secondary_sleep_seconds = max_secondary_sleep_seconds
        self.total_secondary_sleep = 0.0
        self._sleep = sleep
        self._clock = clock

    @staticmethod
    def _headers(exc: RateLimitExceededException) -> Dict[str, str]:
        return {str(k).lower(): str(v) for k, v in (exc.headers or {}).items()}

    @staticmethod
    def _message(exc: RateLimitExceededException) -> str:
        data = exc.data
        if isinstance(data, dict):
            return str(data.get("message", ""))
        return str(data or "")

    def classify(self, exc: RateLimitExceededException) -> RateLimitKind:
        """
        Tell primary and secondary limits apart.

        Args:
            exc (RateLimitExceededException): The exception raised by PyGithub.

        Returns:
            RateLimitKind: The kind of limit that was hit.
        """
        headers = self._headers(exc)
        if "secondary rate limit" in self._message(exc).lower():
            return RateLimitKind.SECONDARY
        if headers.get("x-ratelimit-remaining") == "0":
            return RateLimitKind.PRIMARY
        if "retry-after" in headers:
            return RateLimitKind.SECONDARY
        return RateLimitKind.PRIMARY

    def wait_seconds(self, exc: RateLimitExceededException) -> float:
        """
        Compute how long to wait before repeating the request.

        Args:
            exc (RateLimitExceededException): The exception raised by PyGithub.

        Returns:
            float: Seconds to sleep, never negative.
        """
        headers = self._headers(exc)
        retry_after = headers.get("retry-after", "")
        if retry_after.isdigit():
            return float(retry_after)

        if self.classify(exc) is RateLimitKind.PRIMARY:
            reset = headers.get("x-ratelimit-reset", "")
            if reset.isdigit():
                reset_time = datetime.fromtimestamp(int(reset), timezone.utc)
                return max(0.0, (reset_time - self._clock()).total_seconds()) + 1

        return float(self.secondary_wait_seconds)

    def handle(self, exc: RateLimitExceededException) -> None:
        """
        Sleep so the failed request can be repeated, or re-raise.

        Args:
            exc (RateLimitExceededException): The exception raised by PyGithub.

        Raises:
            RateLimitExceededException: When the configured action is ``abort``
                or the secondary sleep budget is used up.
        """
        kind = self.classify(exc)
        wait = self.wait_seconds(exc)

        if kind is RateLimitKind.PRIMARY:
            if self.on_primary_limit is PrimaryLimitAction.ABORT:
                logger.error(
                    {"message": "Primary rate limit hit, aborting", "wait_seconds": wait}
                )
                raise exc
            logger.warning(
                {
                    "message": "Primary rate limit detected, waiting for reset",
                    "wait_seconds": wait,
                }
            )
            self._sleep(wait)
            logger.info({"message": "Rate limit reset completed, continuing"})
            return

        if self.on_secondary_limit is SecondaryLimitAction.ABORT:
            logger.error(
                {"message": "Secondary rate limit hit, aborting", "wait_seconds": wait}
            )
            raise exc

        if (
            self.max_secondary_sleep_seconds is not None
            and self.total_secondary_sleep + wait > self.max_secondary_sleep_seconds
        ):
            logger.error(
                {
                    "message": "Secondary rate limit sleep budget exhausted",
                    "total_sleep_seconds": self.total_secondary_sleep,
                    "max_sleep_seconds": self.max_secondary_sleep_seconds,
                }
            )
            raise exc

        self.total_secondary_sleep += wait
        logger.warning(
            {
                "message": "Secondary rate limit detected",
                "wait_seconds": wait,
                "total_sleep_seconds": self.total_secondary_sleep,
            }
        )
        self._sleep(wait)
