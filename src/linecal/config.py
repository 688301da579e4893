from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging
import os
import yaml

from .errors import ConfigurationError
from .line_push import LINE_PUSH_ENDPOINT
from .window import EXCLUSIVE, WINDOW_MODES

@dataclass(frozen=True)
class GoogleConfig:
    credentials: str            # service account key JSON text
    credentials_path: str       # OAuth client secrets file
    token_path: str             # authorized-user token file

@dataclass(frozen=True)
class LineConfig:
    channel_access_token: str
    user_id: str
    endpoint: str

@dataclass(frozen=True)
class AppConfig:
    calendar_id: str
    timezone: str
    tz: ZoneInfo
    log_level: str
    window_mode: str
    request_timeout_seconds: int
    google: GoogleConfig
    line: LineConfig


def _pick(env: Mapping[str, str], key: str, section: Dict[str, Any], name: str, default: str = "") -> str:
    value = env.get(key, "").strip()
    if value:
        return value
    value = section.get(name)
    if value is None or str(value).strip() == "":
        return default
    return str(value).strip()


def _section(value: Any, name: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"{name} must be a mapping, got {type(value).__name__}")
    return value


def _resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ConfigurationError(f"Unknown timezone: {name!r}") from exc


def load_config(path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build the run configuration from an optional YAML file and the environment.

    Environment variables win over the file, the file wins over defaults.
    """
    env = os.environ if env is None else env
    data: Dict[str, Any] = {}
    if path:
        p = Path(path)
        if not p.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        try:
            data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Config file {path} is not valid YAML: {exc}") from exc
        data = _section(data, path)

    google = _section(data.get("google"), "google")
    line = _section(data.get("line"), "line")

    timezone = _pick(env, "TIMEZONE", data, "timezone", "Asia/Tokyo")
    window_mode = _pick(env, "WINDOW_MODE", data, "window_mode", EXCLUSIVE).lower()
    if window_mode not in WINDOW_MODES:
        raise ConfigurationError(f"WINDOW_MODE must be one of {', '.join(WINDOW_MODES)}, got {window_mode!r}")

    timeout_raw = _pick(env, "REQUEST_TIMEOUT_SECONDS", data, "request_timeout_seconds", "30")
    try:
        timeout = int(timeout_raw)
    except ValueError as exc:
        raise ConfigurationError(f"REQUEST_TIMEOUT_SECONDS must be an integer, got {timeout_raw!r}") from exc

    log_level = _pick(env, "LOG_LEVEL", data, "log_level", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"LOG_LEVEL must be a logging level name, got {log_level!r}")

    cfg = AppConfig(
        calendar_id=_pick(env, "CALENDAR_ID", data, "calendar_id", "primary"),
        timezone=timezone,
        tz=_resolve_timezone(timezone),
        log_level=log_level,
        window_mode=window_mode,
        request_timeout_seconds=timeout,
        google=GoogleConfig(
            credentials=_pick(env, "GOOGLE_CREDENTIALS", google, "credentials"),
            credentials_path=_pick(env, "GOOGLE_CREDENTIALS_JSON", google, "credentials_path"),
            token_path=_pick(env, "GOOGLE_TOKEN_JSON", google, "token_path"),
        ),
        line=LineConfig(
            channel_access_token=_pick(env, "LINE_CHANNEL_ACCESS_TOKEN", line, "channel_access_token"),
            user_id=_pick(env, "LINE_USER_ID", line, "user_id"),
            endpoint=_pick(env, "LINE_ENDPOINT", line, "endpoint", LINE_PUSH_ENDPOINT),
        ),
    )

    if not cfg.google.credentials and not cfg.google.token_path:
        raise ConfigurationError("GOOGLE_CREDENTIALS or GOOGLE_TOKEN_JSON must be set")
    if not cfg.line.channel_access_token:
        raise ConfigurationError("LINE_CHANNEL_ACCESS_TOKEN must be set")
    if not cfg.line.user_id:
        raise ConfigurationError("LINE_USER_ID must be set")
    return cfg
