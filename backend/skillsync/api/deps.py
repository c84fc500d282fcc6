# skillsync/api/deps.py

from functools import lru_cache

from skillsync.clients.fcm import FCMClient
from skillsync.clients.resend import ResendClient
from skillsync.clients.whereby import WherebyClient


def get_meeting_client() -> WherebyClient:
    return WherebyClient()


def get_email_client() -> ResendClient:
    return ResendClient()


@lru_cache(maxsize=1)
def get_push_client() -> FCMClient:
    # Shared so the OAuth2 access token is reused between requests
    return FCMClient()
