from __future__ import annotations
import json
import logging
import os
from typing import Any, List, Optional

import google_auth_httplib2
import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiError

from .errors import ConfigurationError, RetrievalError
from .models import RawEvent
from .window import TimeWindow

log = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]
MAX_RESULTS = 50


def _service_account_creds(credentials_json: str):
    try:
        info = json.loads(credentials_json)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"GOOGLE_CREDENTIALS is not valid JSON: {exc}") from exc
    try:
        return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
    except (ValueError, KeyError) as exc:
        raise ConfigurationError(f"GOOGLE_CREDENTIALS is not a service account key: {exc}") from exc


def _user_creds(credentials_path: str, token_path: str) -> Credentials:
    if os.path.exists(token_path):
        try:
            return Credentials.from_authorized_user_file(token_path, SCOPES)
        except (ValueError, OSError) as exc:
            raise ConfigurationError(f"Token file {token_path} is not usable: {exc}") from exc

    if not credentials_path:
        raise ConfigurationError(f"Token file {token_path} missing and no OAuth client file configured")
    try:
        flow = InstalledAppFlow.from_client_secrets_file(credentials_path, SCOPES)
    except (ValueError, OSError) as exc:
        raise ConfigurationError(f"OAuth client file {credentials_path} is not usable: {exc}") from exc
    creds = flow.run_local_server(port=0)
    token_dir = os.path.dirname(token_path)
    if token_dir:
        os.makedirs(token_dir, exist_ok=True)
    with open(token_path, "w", encoding="utf-8") as f:
        f.write(creds.to_json())
    return creds


def get_credentials(google_cfg):
    if google_cfg.credentials:
        return _service_account_creds(google_cfg.credentials)
    return _user_creds(google_cfg.credentials_path, google_cfg.token_path)


class GoogleCalendarSource:
    """Lists raw events of one day window from the Google Calendar v3 API."""

    def __init__(self, service: Any):
        self.service = service

    @classmethod
    def from_config(cls, google_cfg, timeout: Optional[float] = None) -> "GoogleCalendarSource":
        creds = get_credentials(google_cfg)
        http = google_auth_httplib2.AuthorizedHttp(creds, http=httplib2.Http(timeout=timeout))
        service = build("calendar", "v3", http=http, cache_discovery=False)
        return cls(service)

    def list_events(self, calendar_id: str, window: TimeWindow) -> List[RawEvent]:
        time_min, time_max = window.bounds()
        try:
            resp = self.service.events().list(
                calendarId=calendar_id,
                timeMin=time_min,
                timeMax=time_max,
                singleEvents=True,
                orderBy="startTime",
                maxResults=MAX_RESULTS,
            ).execute()
        except (GoogleApiError, GoogleAuthError, httplib2.HttpLib2Error, OSError) as exc:
            raise RetrievalError(
                f"Google Calendar query for {calendar_id} [{time_min}, {time_max}] failed: {exc}"
            ) from exc

        items = resp.get("items", [])
        log.debug("Google Calendar returned %d items for %s", len(items), time_min)
        return [RawEvent.from_google(item) for item in items]
