from __future__ import annotations
from datetime import date, timedelta
from typing import List, Sequence

from .models import Event

HEADER = "Google Calendar LINE Notifier"
TODAY_LABEL = "本日"
TOMORROW_LABEL = "翌日"
NO_EVENTS = "予定なし"
ALL_DAY_MARK = "(終日)"
BULLET = "🔸"
LOCATION_MARK = "📍"

# date.weekday(): Monday == 0
_WEEKDAYS = ("月", "火", "水", "木", "金", "土", "日")


def _weekday_label(day: date) -> str:
    return _WEEKDAYS[day.weekday()]


def _fmt_day(day: date) -> str:
    # Example: 8/23(金)
    return f"{day.month}/{day.day}({_weekday_label(day)})"


def _fmt_time_range(e: Event) -> str:
    return f"{e.start.strftime('%H:%M')}〜{e.end.strftime('%H:%M')}"


def _event_lines(e: Event) -> List[str]:
    if e.all_day:
        lines = [f"{BULLET} {e.title} {ALL_DAY_MARK}"]
    else:
        lines = [f"{BULLET} {_fmt_time_range(e)} {e.title}"]
    if e.location:
        lines.append(f"   {LOCATION_MARK} {e.location}")
    return lines


def _day_section(label: str, day: date, events: Sequence[Event]) -> List[str]:
    if not events:
        return [f"{label} {_fmt_day(day)}: {NO_EVENTS}"]

    lines = [f"{label} {_fmt_day(day)} ({len(events)}件):"]
    for e in events:
        lines.extend(_event_lines(e))
    return lines


def render_schedule(today: date, today_events: Sequence[Event], tomorrow_events: Sequence[Event]) -> str:
    """Render the two-day digest text.

    Events are written in the order given. Every line ends with a newline;
    the header is followed by one blank line and the two day sections are
    separated by two.
    """
    tomorrow = today + timedelta(days=1)
    lines = [HEADER, ""]
    lines.extend(_day_section(TODAY_LABEL, today, today_events))
    lines.extend(["", ""])
    lines.extend(_day_section(TOMORROW_LABEL, tomorrow, tomorrow_events))
    return "\n".join(lines) + "\n"
