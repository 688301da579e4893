from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

EXCLUSIVE = "exclusive"
INCLUSIVE = "inclusive"
WINDOW_MODES = (EXCLUSIVE, INCLUSIVE)


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime

    def bounds(self) -> tuple[str, str]:
        return self.start.isoformat(), self.end.isoformat()


def local_midnight(day: date, tz: ZoneInfo) -> datetime:
    # Built from calendar fields so DST days and UTC offsets never shift the date.
    return datetime.combine(day, time.min, tzinfo=tz)


def day_window(day: date, tz: ZoneInfo) -> TimeWindow:
    """[00:00 of ``day``, 00:00 of the next day) in ``tz``."""
    return TimeWindow(
        start=local_midnight(day, tz),
        end=local_midnight(day + timedelta(days=1), tz),
    )


def inclusive_window(start_day: date, end_day: date, tz: ZoneInfo) -> TimeWindow:
    """[00:00 of ``start_day``, 23:59:59 of ``end_day``] in ``tz``."""
    return TimeWindow(
        start=local_midnight(start_day, tz),
        end=datetime.combine(end_day, time(23, 59, 59), tzinfo=tz),
    )


def window_for(day: date, tz: ZoneInfo, mode: str = EXCLUSIVE) -> TimeWindow:
    if mode == EXCLUSIVE:
        return day_window(day, tz)
    if mode == INCLUSIVE:
        return inclusive_window(day, day, tz)
    raise ValueError(f"Unknown window mode: {mode!r}")


def local_today(tz: ZoneInfo, now: Optional[datetime] = None) -> date:
    now = now or datetime.now(tz=tz)
    return now.astimezone(tz).date()
