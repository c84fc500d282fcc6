# skillsync/clients/resend.py

import logging

import requests

from skillsync.core import config
from skillsync.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendClient:
    """Transactional e-mail over the Resend REST API"""

    def __init__(
        self,
        api_key: str | None = None,
        sender: str | None = None,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key if api_key is not None else config.RESEND_API_KEY
        self.sender = sender or config.EMAIL_FROM
        self.session = session or requests.Session()

    def send_email(self, to: str | list[str], subject: str, html: str) -> dict:
        if not self.api_key:
            raise ExternalServiceError("resend", "RESEND_API_KEY is not set")

        recipients = [to] if isinstance(to, str) else list(to)
        try:
            resp = self.session.post(
                RESEND_EMAILS_URL,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": self.sender,
                    "to": recipients,
                    "subject": subject,
                    "html": html,
                },
                timeout=config.HTTP_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            raise ExternalServiceError("resend", f"Resend request failed: {e}")

        if not resp.ok:
            raise ExternalServiceError(
                "resend",
                f"Resend API error: {resp.status_code}",
                status=resp.status_code,
                details={"body": resp.text[:500]},
            )
        return resp.json()
