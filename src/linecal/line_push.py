from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import requests

from .errors import DeliveryError

log = logging.getLogger(__name__)

LINE_PUSH_ENDPOINT = "https://api.line.me/v2/bot/message/push"


def _error_detail(resp: requests.Response) -> Optional[str]:
    try:
        payload = resp.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None

    detail = str(payload.get("message") or "")
    if not detail:
        return None
    details = payload.get("details")
    if isinstance(details, list) and details and isinstance(details[0], dict) and details[0].get("message"):
        detail += f" (detail: {details[0]['message']})"
    return detail


class LinePushClient:
    """Sends text messages to one LINE user through the Messaging API push endpoint."""

    def __init__(
        self,
        channel_access_token: str,
        endpoint: str = LINE_PUSH_ENDPOINT,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "Authorization": f"Bearer {channel_access_token}",
            }
        )

    def push_text(self, to: str, text: str) -> None:
        body: Dict[str, Any] = {
            "to": to,
            "messages": [{"type": "text", "text": text}],
        }
        try:
            resp = self._session.post(self.endpoint, json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            raise DeliveryError(f"LINE API request could not be sent: {exc}") from exc

        if resp.status_code != 200:
            message = f"LINE API request failed (status {resp.status_code})"
            detail = _error_detail(resp)
            if detail:
                message += f": {detail}"
            raise DeliveryError(
                message,
                status_code=resp.status_code,
            )

        log.info("LINE push delivered to %s (%d chars)", to, len(text))
