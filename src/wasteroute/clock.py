"""Time source and calendar-day boundaries."""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from typing import Protocol
from zoneinfo import ZoneInfo

from .config import settings


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock returning timezone-aware UTC datetimes."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant; advance it explicitly."""

    def __init__(self, instant: datetime) -> None:
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, **kwargs: float) -> datetime:
        self.instant = self.instant + timedelta(**kwargs)
        return self.instant


def day_window(instant: datetime, tz_name: str | None = None) -> tuple[datetime, datetime]:
    """Return the half-open ``[start, end)`` local calendar day containing ``instant``."""

    tz = ZoneInfo(tz_name or settings.local_timezone)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    local_day = instant.astimezone(tz).date()
    start = datetime.combine(local_day, time.min, tzinfo=tz)
    end = datetime.combine(local_day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end


def today_window(clock: Clock, tz_name: str | None = None) -> tuple[datetime, datetime]:
    return day_window(clock.now(), tz_name)
