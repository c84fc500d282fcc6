# skillsync/clients/whereby.py

import logging
from datetime import datetime

import requests

from skillsync.core import config
from skillsync.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

WHEREBY_MEETINGS_URL = "https://api.whereby.dev/v1/meetings"


def _iso(value: datetime) -> str:
    if value.tzinfo is None:
        return value.isoformat(timespec="milliseconds") + "Z"
    return value.isoformat(timespec="milliseconds")


class WherebyClient:
    """Provisions video rooms for confirmed sessions"""

    def __init__(self, api_key: str | None = None, session: requests.Session | None = None):
        self.api_key = api_key if api_key is not None else config.WHEREBY_API_KEY
        self.session = session or requests.Session()

    def create_meeting(self, start: datetime, end: datetime) -> dict:
        if not self.api_key:
            raise ExternalServiceError("whereby", "WHEREBY_API_KEY is not set")

        try:
            resp = self.session.post(
                WHEREBY_MEETINGS_URL,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "startDate": _iso(start),
                    "endDate": _iso(end),
                    "fields": ["hostRoomUrl", "roomUrl"],
                },
                timeout=config.HTTP_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            raise ExternalServiceError("whereby", f"Whereby request failed: {e}")

        if not resp.ok:
            logger.error("Whereby API error: %s", resp.text)
            raise ExternalServiceError(
                "whereby", f"Whereby API error: {resp.status_code}", status=resp.status_code
            )

        data = resp.json()
        logger.info("Whereby meeting created: %s", data.get("roomUrl"))
        return {"roomUrl": data.get("roomUrl"), "hostRoomUrl": data.get("hostRoomUrl")}
