"""Usage period policies — decide which bucket a metered call is billed to."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from src.core.interfaces import PeriodPolicy


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CalendarMonthPeriod(PeriodPolicy):
    """One bucket per calendar month ("YYYY-MM").

    Every month starts from zero regardless of when the tenant signed up.
    Usage recorded late on the last day of a month is not visible to a check
    made minutes later on the first day of the next one.
    """

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock

    def key_for(self, moment: datetime) -> str:
        return moment.strftime("%Y-%m")

    def current_key(self) -> str:
        return self.key_for(self._clock())
