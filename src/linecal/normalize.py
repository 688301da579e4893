"""Conversion of raw calendar items into :class:`Event` values.

Normalization is a pure function of the raw item and the configured
timezone. A single bad item raises :class:`NormalizationError`;
:func:`normalize_events` logs it and drops that item only.
"""
from __future__ import annotations
from datetime import date, datetime
import logging
import re
from typing import Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from .errors import InvalidTimeField, MissingTimeField, NormalizationError
from .models import Event, EventDate, EventDateTime, EventTime, RawEvent
from .window import local_midnight

log = logging.getLogger(__name__)

UNTITLED = "（無題）"


_RFC3339 = re.compile(r"(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})")
_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def _parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp; the UTC offset is mandatory."""
    m = _RFC3339.fullmatch(value)
    if m is None:
        raise ValueError("not an RFC 3339 timestamp")
    day, clock, fraction, offset = m.groups()
    # fromisoformat() on 3.10 wants exactly 6 fraction digits and no "Z".
    if fraction:
        clock += "." + fraction[:6].ljust(6, "0")
    if offset in ("Z", "z"):
        offset = "+00:00"
    return datetime.fromisoformat(f"{day}T{clock}{offset}")


def _parse_date(value: str) -> date:
    if _DATE.fullmatch(value) is None:
        raise ValueError("not a YYYY-MM-DD date")
    return date.fromisoformat(value)


def resolve_time(
    field: str,
    value: Optional[EventTime],
    tz: ZoneInfo,
    event_id: str = "",
) -> Tuple[datetime, bool]:
    """Return ``(instant in tz, is_date_only)`` for one start/end boundary."""
    if isinstance(value, EventDateTime):
        try:
            return _parse_timestamp(value.value).astimezone(tz), False
        except ValueError as exc:
            raise InvalidTimeField(field, value.value, event_id) from exc
    if isinstance(value, EventDate):
        try:
            return local_midnight(_parse_date(value.value), tz), True
        except ValueError as exc:
            raise InvalidTimeField(field, value.value, event_id) from exc
    raise MissingTimeField(field, event_id)


def normalize_event(raw: RawEvent, tz: ZoneInfo) -> Event:
    start, all_day = resolve_time("start", raw.start, tz, raw.id)
    # Only the start encoding decides whether the event is all-day.
    end, _ = resolve_time("end", raw.end, tz, raw.id)

    return Event(
        id=raw.id,
        title=raw.summary or UNTITLED,
        start=start,
        end=end,
        all_day=all_day,
        location=raw.location,
        description=raw.description,
    )


def normalize_events(raw_events: Iterable[RawEvent], tz: ZoneInfo) -> List[Event]:
    events: List[Event] = []
    for raw in raw_events:
        try:
            events.append(normalize_event(raw, tz))
        except NormalizationError as exc:
            log.warning("Skipping event %r (%s): %s", raw.id, exc.field, exc)
    return events
