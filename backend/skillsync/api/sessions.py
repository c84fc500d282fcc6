# skillsync/api/sessions.py

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from skillsync.api.deps import get_email_client, get_meeting_client
from skillsync.api.serializers import session_out
from skillsync.clients.resend import ResendClient
from skillsync.clients.whereby import WherebyClient
from skillsync.core import session as session_core
from skillsync.core.circuit_breaker import BOOK_SESSION_LIMIT, limiter
from skillsync.core.exceptions import SkillSyncError
from skillsync.core.security import CurrentUser, get_current_user
from skillsync.infra.postgres import get_db
from skillsync.services.notifications import NOTIFIABLE_STATUSES, send_session_status_notification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions")


class BookSessionSchema(BaseModel):
    teacher_id: str
    skill: str
    scheduled_at: datetime
    duration_minutes: int = 60
    notes: str | None = None


class UpdateStatusSchema(BaseModel):
    status: str


@router.post("", status_code=201)
@limiter.limit(BOOK_SESSION_LIMIT)
def book_session(
    request: Request,
    payload: BookSessionSchema,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    session = session_core.book_session(
        db,
        user,
        teacher_id=payload.teacher_id,
        skill=payload.skill,
        scheduled_at=payload.scheduled_at,
        duration_minutes=payload.duration_minutes,
        notes=payload.notes,
    )
    return session_out(session)


@router.get("")
def list_my_sessions(
    status: str | None = None,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        {
            **session_out(item["session"]),
            "role": item["role"],
            "partner_id": item["partner_id"],
            "partner_name": item["partner_name"],
        }
        for item in session_core.list_sessions(db, user, status)
    ]


@router.get("/{session_id}")
def read_session(
    session_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return session_out(session_core.get_session_for(db, user, session_id))


@router.patch("/{session_id}/status")
def update_status(
    session_id: str,
    payload: UpdateStatusSchema,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    meetings: WherebyClient = Depends(get_meeting_client),
    email: ResendClient = Depends(get_email_client),
):
    session = session_core.update_session_status(
        db, user, session_id, payload.status, meetings=meetings
    )

    if payload.status in NOTIFIABLE_STATUSES:
        # E-mail is not critical to the status change
        try:
            send_session_status_notification(db, session.id, payload.status, email=email)
        except SkillSyncError as e:
            logger.error("Failed to send notification email for %s: %s", session.id, e)

    return session_out(session)


@router.delete("/{session_id}", status_code=204)
def remove_session(
    session_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    session_core.delete_session(db, user, session_id)
