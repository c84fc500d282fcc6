# skillsync/api/messages.py

import asyncio
import logging

from fastapi import APIRouter, Depends, Request, WebSocket, WebSocketDisconnect
from pydantic import BaseModel
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from skillsync.api.serializers import conversation_out, message_out
from skillsync.core import message as message_core
from skillsync.core.circuit_breaker import SEND_MESSAGE_LIMIT, limiter
from skillsync.core.exceptions import SkillSyncError
from skillsync.core.security import CurrentUser, get_current_user, user_from_token
from skillsync.infra.postgres import get_db
from skillsync.services.relay_service import hub

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversations")

# Close codes for rejected realtime subscriptions
WS_UNAUTHORIZED = 4401
WS_FORBIDDEN = 4403


class StartConversationSchema(BaseModel):
    other_user_id: str


class SendMessageSchema(BaseModel):
    content: str
    conversation_id: str | None = None
    other_user_id: str | None = None


@router.get("")
def my_conversations(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        {
            **conversation_out(item["conversation"]),
            "other_user": item["other_user"],
            "last_message": item["last_message"],
            "unread_count": item["unread_count"],
        }
        for item in message_core.list_conversations(db, user)
    ]


@router.post("")
def start_conversation(
    payload: StartConversationSchema,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    conversation = message_core.get_or_create_conversation(db, user, payload.other_user_id)
    return conversation_out(conversation)


@router.post("/messages", status_code=201)
@limiter.limit(SEND_MESSAGE_LIMIT)
def send_message(
    request: Request,
    payload: SendMessageSchema,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Send to an existing conversation, or to a user (conversation created on demand)"""
    message = message_core.send_message(
        db,
        user,
        payload.content,
        conversation_id=payload.conversation_id,
        other_user_id=payload.other_user_id,
    )
    return message_out(message)


@router.get("/{conversation_id}/messages")
def read_messages(
    conversation_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [message_out(m) for m in message_core.list_messages(db, user, conversation_id)]


@router.post("/{conversation_id}/read")
def mark_conversation_read(
    conversation_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"updated": message_core.mark_read(db, user, conversation_id)}


@router.websocket("/{conversation_id}/ws")
async def conversation_feed(
    websocket: WebSocket,
    conversation_id: str,
    token: str | None = None,
    db: Session = Depends(get_db),
):
    """Push new messages of one conversation as they are inserted"""
    try:
        user = user_from_token(token or "")
    except SkillSyncError:
        await websocket.close(code=WS_UNAUTHORIZED)
        return

    try:
        await run_in_threadpool(message_core.get_conversation_for, db, user, conversation_id)
    except SkillSyncError:
        await websocket.close(code=WS_FORBIDDEN)
        return
    finally:
        db.close()

    queue = hub.subscribe(conversation_id)
    await websocket.accept()
    logger.info("User %s subscribed to conversation %s", user.id, conversation_id)

    async def pump():
        while True:
            event = await queue.get()
            await websocket.send_json(event)

    pump_task = asyncio.create_task(pump())
    try:
        # Client messages are ignored; reading surfaces the disconnect
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        pump_task.cancel()
        try:
            await pump_task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.warning("Feed for conversation %s stopped sending: %s", conversation_id, e)
        hub.unsubscribe(conversation_id, queue)
        logger.info("User %s left conversation feed %s", user.id, conversation_id)
