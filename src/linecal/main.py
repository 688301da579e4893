from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .calendar_google import GoogleCalendarSource
from .config import AppConfig, load_config
from .errors import LinecalError
from .line_push import LinePushClient
from .notify import NotifySchedule, RunResult, RunState
from .window import local_today

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(level: str) -> None:
    # load_config has already checked that level is a known level name.
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def build_use_case(cfg: AppConfig) -> NotifySchedule:
    source = GoogleCalendarSource.from_config(cfg.google, timeout=cfg.request_timeout_seconds)
    notifier = LinePushClient(
        cfg.line.channel_access_token,
        endpoint=cfg.line.endpoint,
        timeout=cfg.request_timeout_seconds,
    )
    return NotifySchedule(
        source=source,
        notifier=notifier,
        calendar_id=cfg.calendar_id,
        recipient=cfg.line.user_id,
        tz=cfg.tz,
        window_mode=cfg.window_mode,
    )


def run_once(
    config_path: Optional[str] = None,
    today: Optional[date] = None,
    dry_run: bool = False,
) -> RunResult:
    load_dotenv()
    cfg = load_config(config_path)
    _configure_logging(cfg.log_level)

    today = today or local_today(cfg.tz)
    log.info("Starting schedule notification for %s (%s)", today.isoformat(), cfg.timezone)

    result = build_use_case(cfg).execute(today, dry_run=dry_run)
    if result.state is RunState.DELIVERED:
        log.info("Schedule notification delivered")
    return result


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Serverless entry point; the scheduler payload is ignored."""
    try:
        result = run_once()
    except LinecalError as exc:
        log.error("Schedule notification aborted: %s", exc)
        raise

    if result.state is RunState.SKIPPED:
        return {"statusCode": 200, "message": "No events today or tomorrow; notification skipped"}
    return {"statusCode": 200, "message": "Notification sent"}


def main():
    import argparse

    ap = argparse.ArgumentParser(description="Push today's and tomorrow's Google Calendar events to LINE")
    ap.add_argument("--config", default=None, help="optional YAML config file")
    ap.add_argument("--date", type=date.fromisoformat, default=None, help="override today (YYYY-MM-DD)")
    ap.add_argument("--dry-run", action="store_true", help="print the digest instead of sending it")
    args = ap.parse_args()

    try:
        result = run_once(config_path=args.config, today=args.date, dry_run=args.dry_run)
    except LinecalError as exc:
        raise SystemExit(f"linecal: {exc}") from exc
    if result.state is RunState.SKIPPED:
        print("No events today or tomorrow; nothing to send")
    elif args.dry_run:
        print(result.digest, end="")


if __name__ == "__main__":
    main()
