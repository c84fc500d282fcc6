from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from skillsync.clients.resend import RESEND_EMAILS_URL, ResendClient
from skillsync.clients.whereby import WHEREBY_MEETINGS_URL, WherebyClient
from skillsync.core.exceptions import ExternalServiceError


def _response(ok=True, status=200, payload=None, text=""):
    resp = MagicMock()
    resp.ok = ok
    resp.status_code = status
    resp.json.return_value = payload or {}
    resp.text = text
    return resp


class TestWherebyClient:
    def test_create_meeting(self):
        http = MagicMock()
        http.post.return_value = _response(payload={
            "roomUrl": "https://whereby.com/abc",
            "hostRoomUrl": "https://whereby.com/abc?roomKey=x",
            "meetingId": "1",
        })
        client = WherebyClient(api_key="wb-key", session=http)

        room = client.create_meeting(
            datetime(2025, 3, 3, 14, 30), datetime(2025, 3, 3, 15, 30, tzinfo=timezone.utc)
        )

        assert room == {
            "roomUrl": "https://whereby.com/abc",
            "hostRoomUrl": "https://whereby.com/abc?roomKey=x",
        }
        assert http.post.call_args.args[0] == WHEREBY_MEETINGS_URL
        assert http.post.call_args.kwargs["headers"]["Authorization"] == "Bearer wb-key"
        assert http.post.call_args.kwargs["json"] == {
            "startDate": "2025-03-03T14:30:00.000Z",
            "endDate": "2025-03-03T15:30:00.000+00:00",
            "fields": ["hostRoomUrl", "roomUrl"],
        }

    def test_missing_api_key(self):
        with pytest.raises(ExternalServiceError, match="WHEREBY_API_KEY"):
            WherebyClient(api_key="", session=MagicMock()).create_meeting(
                datetime(2025, 1, 1), datetime(2025, 1, 1, 1)
            )

    def test_api_error(self):
        http = MagicMock()
        http.post.return_value = _response(ok=False, status=401, text="unauthorized")
        with pytest.raises(ExternalServiceError) as exc:
            WherebyClient(api_key="k", session=http).create_meeting(
                datetime(2025, 1, 1), datetime(2025, 1, 1, 1)
            )
        assert exc.value.status_code == 502
        assert exc.value.details == {"service": "whereby", "status": 401}

    def test_network_error(self):
        http = MagicMock()
        http.post.side_effect = requests.ConnectionError("boom")
        with pytest.raises(ExternalServiceError, match="request failed"):
            WherebyClient(api_key="k", session=http).create_meeting(
                datetime(2025, 1, 1), datetime(2025, 1, 1, 1)
            )


class TestResendClient:
    def test_send_email(self):
        http = MagicMock()
        http.post.return_value = _response(payload={"id": "email-1"})
        client = ResendClient(api_key="re-key", sender="SkillSync <hi@skillsync.test>", session=http)

        assert client.send_email("ada@example.com", "Subject", "<p>Hi</p>") == {"id": "email-1"}
        assert http.post.call_args.args[0] == RESEND_EMAILS_URL
        assert http.post.call_args.kwargs["json"] == {
            "from": "SkillSync <hi@skillsync.test>",
            "to": ["ada@example.com"],
            "subject": "Subject",
            "html": "<p>Hi</p>",
        }

    def test_send_email_error(self):
        http = MagicMock()
        http.post.return_value = _response(ok=False, status=422, text="invalid to")
        with pytest.raises(ExternalServiceError) as exc:
            ResendClient(api_key="k", session=http).send_email(["a@b.c"], "s", "h")
        assert exc.value.details["status"] == 422

    def test_missing_api_key(self):
        with pytest.raises(ExternalServiceError, match="RESEND_API_KEY"):
            ResendClient(api_key="", session=MagicMock()).send_email("a@b.c", "s", "h")
