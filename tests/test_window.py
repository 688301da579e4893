from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from linecal.window import day_window, inclusive_window, local_today, window_for


def test_exclusive_window_spans_local_midnight_to_next_midnight():
    tz = ZoneInfo("Asia/Tokyo")

    window = day_window(date(2024, 8, 23), tz)

    assert window.bounds() == ("2024-08-23T00:00:00+09:00", "2024-08-24T00:00:00+09:00")
    assert window.end - window.start == timedelta(hours=24)


def test_exclusive_window_works_with_fixed_offset_timezone():
    tz = timezone(timedelta(hours=9))

    window = day_window(date(2024, 8, 23), tz)

    assert window.start == datetime(2024, 8, 22, 15, 0, tzinfo=timezone.utc)
    assert window.end == datetime(2024, 8, 23, 15, 0, tzinfo=timezone.utc)


def test_inclusive_window_ends_at_last_second_of_end_day():
    tz = ZoneInfo("Asia/Tokyo")

    window = inclusive_window(date(2024, 8, 23), date(2024, 8, 24), tz)

    assert window.bounds() == ("2024-08-23T00:00:00+09:00", "2024-08-24T23:59:59+09:00")


def test_window_for_inclusive_mode_covers_single_day():
    tz = ZoneInfo("Asia/Tokyo")

    window = window_for(date(2024, 8, 23), tz, "inclusive")

    assert window.bounds() == ("2024-08-23T00:00:00+09:00", "2024-08-23T23:59:59+09:00")


def test_window_for_rejects_unknown_mode():
    with pytest.raises(ValueError):
        window_for(date(2024, 8, 23), ZoneInfo("Asia/Tokyo"), "sliding")


def test_window_on_dst_change_day_uses_local_calendar_fields():
    tz = ZoneInfo("America/New_York")

    window = day_window(date(2024, 3, 10), tz)

    assert window.start.isoformat() == "2024-03-10T00:00:00-05:00"
    assert window.end.isoformat() == "2024-03-11T00:00:00-04:00"
    assert window.end.astimezone(timezone.utc) - window.start.astimezone(timezone.utc) == timedelta(hours=23)


def test_local_today_uses_configured_timezone_not_utc_date():
    tz = ZoneInfo("Asia/Tokyo")
    # 20:30 UTC on the 22nd is already the 23rd in Tokyo.
    now = datetime(2024, 8, 22, 20, 30, tzinfo=timezone.utc)

    assert local_today(tz, now) == date(2024, 8, 23)
