from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
import logging
from typing import List, Optional, Protocol
from zoneinfo import ZoneInfo

from .errors import LinecalError
from .models import Event, RawEvent
from .normalize import normalize_events
from .render import render_schedule
from .window import EXCLUSIVE, TimeWindow, window_for

log = logging.getLogger(__name__)


class EventSource(Protocol):
    def list_events(self, calendar_id: str, window: TimeWindow) -> List[RawEvent]:
        ...


class PushDelivery(Protocol):
    def push_text(self, to: str, text: str) -> None:
        ...


class RunState(Enum):
    START = "start"
    WINDOW_COMPUTED = "window_computed"
    TODAY_FETCHED = "today_fetched"
    TOMORROW_FETCHED = "tomorrow_fetched"
    SKIPPED = "skipped"
    RENDERED = "rendered"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass
class RunResult:
    state: RunState = RunState.START
    today_events: List[Event] = field(default_factory=list)
    tomorrow_events: List[Event] = field(default_factory=list)
    digest: Optional[str] = None


class NotifySchedule:
    """Fetches today's and tomorrow's events and pushes one digest, or skips."""

    def __init__(
        self,
        source: EventSource,
        notifier: PushDelivery,
        calendar_id: str,
        recipient: str,
        tz: ZoneInfo,
        window_mode: str = EXCLUSIVE,
    ) -> None:
        self.source = source
        self.notifier = notifier
        self.calendar_id = calendar_id
        self.recipient = recipient
        self.tz = tz
        self.window_mode = window_mode

    def _fetch(self, label: str, window: TimeWindow) -> List[Event]:
        raw = self.source.list_events(self.calendar_id, window)
        events = normalize_events(raw, self.tz)
        log.info("%s: %d events fetched, %d kept", label, len(raw), len(events))
        return events

    def execute(self, today: date, dry_run: bool = False) -> RunResult:
        result = RunResult()
        try:
            self._run(result, today, dry_run)
        except LinecalError as exc:
            failed_in = result.state
            result.state = RunState.FAILED
            exc.result = result
            log.error("Schedule notification %s after %s: %s", result.state.value, failed_in.value, exc)
            raise
        return result

    def _run(self, result: RunResult, today: date, dry_run: bool) -> None:
        tomorrow = today + timedelta(days=1)
        today_window = window_for(today, self.tz, self.window_mode)
        tomorrow_window = window_for(tomorrow, self.tz, self.window_mode)
        result.state = RunState.WINDOW_COMPUTED
        log.info(
            "Target dates: today=%s [%s, %s], tomorrow=%s [%s, %s]",
            today, *today_window.bounds(), tomorrow, *tomorrow_window.bounds(),
        )

        result.today_events = self._fetch("today", today_window)
        result.state = RunState.TODAY_FETCHED
        result.tomorrow_events = self._fetch("tomorrow", tomorrow_window)
        result.state = RunState.TOMORROW_FETCHED

        if not result.today_events and not result.tomorrow_events:
            log.info("No events today or tomorrow; skipping notification")
            result.state = RunState.SKIPPED
            return

        result.digest = render_schedule(today, result.today_events, result.tomorrow_events)
        result.state = RunState.RENDERED
        if dry_run:
            return

        self.notifier.push_text(self.recipient, result.digest)
        result.state = RunState.DELIVERED
