from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

@dataclass(frozen=True)
class Event:
    id: str
    title: str
    start: datetime             # timezone-aware, configured timezone
    end: datetime               # timezone-aware, configured timezone
    all_day: bool = False
    location: str = ""
    description: str = ""


@dataclass(frozen=True)
class EventDateTime:
    """A full RFC 3339 timestamp, e.g. "2024-08-23T09:00:00+09:00"."""
    value: str


@dataclass(frozen=True)
class EventDate:
    """A bare calendar date, e.g. "2024-08-23" (all-day events)."""
    value: str


EventTime = Union[EventDateTime, EventDate]


def _event_time(obj: Optional[Dict[str, Any]]) -> Optional[EventTime]:
    if not obj:
        return None
    if obj.get("dateTime"):
        return EventDateTime(str(obj["dateTime"]))
    if obj.get("date"):
        return EventDate(str(obj["date"]))
    return None


@dataclass(frozen=True)
class RawEvent:
    id: str
    summary: str
    start: Optional[EventTime]
    end: Optional[EventTime]
    location: str = ""
    description: str = ""

    @classmethod
    def from_google(cls, item: Dict[str, Any]) -> "RawEvent":
        # All-day events have "date" not "dateTime"
        return cls(
            id=str(item.get("id", "")),
            summary=item.get("summary") or "",
            start=_event_time(item.get("start")),
            end=_event_time(item.get("end")),
            location=item.get("location") or "",
            description=item.get("description") or "",
        )
