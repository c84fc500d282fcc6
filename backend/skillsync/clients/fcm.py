# skillsync/clients/fcm.py

import json
import logging
import threading
import time

import requests

from skillsync.core import config
from skillsync.core.crypto import build_service_account_assertion
from skillsync.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

# =========================
# CONFIGURATION
# =========================

FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
FCM_SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"

TOKEN_LIFETIME_SECONDS = 3600
TOKEN_REFRESH_MARGIN_SECONDS = 60


def load_service_account(raw: str | None = None) -> dict:
    raw = raw if raw is not None else config.FIREBASE_SERVICE_ACCOUNT
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        logger.error("FIREBASE_SERVICE_ACCOUNT is not valid JSON")
        return {}


class FCMClient:
    def __init__(
        self,
        service_account: dict | None = None,
        session: requests.Session | None = None,
        clock=time.time,
    ):
        self.service_account = (
            service_account if service_account is not None else load_service_account()
        )
        self.session = session or requests.Session()
        self.clock = clock
        self._access_token: str | None = None
        self._expires_at = 0.0
        self._token_lock = threading.Lock()

    @property
    def project_id(self) -> str | None:
        return self.service_account.get("project_id")

    @property
    def configured(self) -> bool:
        sa = self.service_account
        return bool(sa.get("client_email") and sa.get("private_key") and sa.get("project_id"))

    # =========================
    # OAUTH2
    # =========================

    def get_access_token(self) -> str:
        """Exchange a signed service-account JWT for an OAuth2 token, cached."""
        with self._token_lock:
            return self._refresh_access_token()

    def _refresh_access_token(self) -> str:
        now = self.clock()
        if self._access_token and now < self._expires_at - TOKEN_REFRESH_MARGIN_SECONDS:
            return self._access_token

        if not self.configured:
            raise ExternalServiceError("fcm", "FIREBASE_SERVICE_ACCOUNT is not configured")

        assertion = build_service_account_assertion(
            client_email=self.service_account["client_email"],
            private_key_pem=self.service_account["private_key"],
            scope=FCM_SCOPE,
            audience=GOOGLE_TOKEN_URL,
            lifetime_seconds=TOKEN_LIFETIME_SECONDS,
            now=int(now),
        )

        try:
            resp = self.session.post(
                GOOGLE_TOKEN_URL,
                data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
                timeout=config.HTTP_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            raise ExternalServiceError("fcm", f"Token request failed: {e}")

        if not resp.ok:
            raise ExternalServiceError(
                "fcm", f"Token exchange failed: {resp.status_code}", status=resp.status_code
            )

        data = resp.json()
        token = data.get("access_token")
        if not token:
            raise ExternalServiceError("fcm", "Token response has no access_token")

        self._access_token = token
        self._expires_at = now + int(data.get("expires_in", TOKEN_LIFETIME_SECONDS))
        return token

    # =========================
    # SEND
    # =========================

    @staticmethod
    def build_message(token: str, title: str, body: str, data: dict | None = None) -> dict:
        return {
            "message": {
                "token": token,
                "notification": {"title": title, "body": body},
                # FCM rejects non-string data values
                "data": {k: str(v) for k, v in (data or {}).items()},
                "android": {
                    "priority": "high",
                    "notification": {"sound": "default"},
                },
                "apns": {
                    "payload": {"aps": {"sound": "default", "badge": 1}},
                },
            }
        }

    def send(self, token: str, title: str, body: str, data: dict | None = None) -> bool:
        """Send to one device. Delivery failures are logged and reported as False."""
        access_token = self.get_access_token()
        try:
            resp = self.session.post(
                FCM_SEND_URL.format(project_id=self.project_id),
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": "application/json",
                },
                json=self.build_message(token, title, body, data),
                timeout=config.HTTP_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            logger.error("Error sending push notification: %s", e)
            return False

        if not resp.ok:
            logger.error("FCM error: %s", resp.text)
            return False
        return True
