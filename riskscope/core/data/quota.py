"""
Per-provider daily request quota.

Each provider adapter owns one DailyQuota. The counter is mutated under a
lock so parallel batch workers can never overspend a vendor's daily limit.
Counters roll over when the UTC date changes.
"""

import logging
import threading
from datetime import date, datetime, timezone
from typing import Callable

logger = logging.getLogger(__name__)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class DailyQuota:
    """
    Thread-safe daily call counter.

    Usage:
        quota = DailyQuota(limit=25)
        if quota.try_consume():
            ...  # make the request
    """

    def __init__(self, limit: int, today: Callable[[], date] = _utc_today):
        if limit < 0:
            raise ValueError(f"Quota limit cannot be negative: {limit}")
        self.limit = limit
        self._today = today
        self._day = today()
        self._used = 0
        self._lock = threading.Lock()

    def _roll_over(self) -> None:
        # Caller holds the lock
        current = self._today()
        if current != self._day:
            logger.info(f"Quota day rolled over ({self._day} -> {current}), resetting usage")
            self._day = current
            self._used = 0

    def try_consume(self, units: int = 1) -> bool:
        """
        Reserve units from today's budget.

        Returns:
            True if the units were reserved, False if that would exceed the limit
        """
        with self._lock:
            self._roll_over()
            if self._used + units > self.limit:
                return False
            self._used += units
            return True

    @property
    def used(self) -> int:
        """Requests made today."""
        with self._lock:
            self._roll_over()
            return self._used

    @property
    def remaining(self) -> int:
        """Requests left today."""
        with self._lock:
            self._roll_over()
            return max(0, self.limit - self._used)

    @property
    def exhausted(self) -> bool:
        """Check if no requests remain today."""
        return self.remaining == 0

    def reset(self) -> None:
        """Reset today's usage to zero."""
        with self._lock:
            self._used = 0

    def __repr__(self) -> str:
        return f"DailyQuota(used={self.used}, limit={self.limit})"
