import asyncio
import logging
import threading
from unittest.mock import MagicMock

from fastapi import WebSocketDisconnect

from skillsync.api import messages as messages_api

from conftest import ALICE, make_token


class FakeWebSocket:
    """Receives one published event, fails to forward it, then disconnects."""

    def __init__(self, conversation_id):
        self.conversation_id = conversation_id
        self.accepted = False
        self.closed_with = None
        self.receives = 0

    async def accept(self):
        self.accepted = True

    async def close(self, code=1000):
        self.closed_with = code

    async def send_json(self, data):
        raise RuntimeError("connection reset")

    async def receive_text(self):
        self.receives += 1
        if self.receives == 1:
            messages_api.hub.publish(self.conversation_id, {"event": "INSERT"})
            await asyncio.sleep(0.05)
        raise WebSocketDisconnect(code=1000)


def test_access_check_runs_off_the_event_loop(monkeypatch):
    loop_thread = threading.get_ident()
    seen = {}

    def fake_check(db, user, conversation_id):
        seen["thread"] = threading.get_ident()
        seen["user"] = user.id

    monkeypatch.setattr(messages_api.message_core, "get_conversation_for", fake_check)
    ws = FakeWebSocket("conv-thread")

    asyncio.run(messages_api.conversation_feed(ws, "conv-thread", make_token(ALICE), MagicMock()))

    assert ws.accepted
    assert seen["user"] == ALICE
    assert seen["thread"] != loop_thread


def test_send_failure_is_logged_and_feed_cleaned_up(monkeypatch, caplog):
    monkeypatch.setattr(
        messages_api.message_core, "get_conversation_for", lambda db, user, cid: None
    )
    db = MagicMock()
    ws = FakeWebSocket("conv-broken")

    with caplog.at_level(logging.WARNING, logger=messages_api.__name__):
        asyncio.run(messages_api.conversation_feed(ws, "conv-broken", make_token(ALICE), db))

    assert "connection reset" in caplog.text
    assert messages_api.hub.subscriber_count("conv-broken") == 0
    db.close.assert_called_once()
