# skillsync/core/session.py

import logging
from datetime import datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.orm import Session

from skillsync.clients.whereby import WherebyClient
from skillsync.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from skillsync.core.profile import display_names, get_profile
from skillsync.core.security import CurrentUser
from skillsync.models.session import SESSION_STATUSES, LearningSession
from skillsync.utils.dates import to_naive_utc

logger = logging.getLogger(__name__)

MIN_DURATION_MINUTES = 15
MAX_DURATION_MINUTES = 480

# Requested action -> stored status. A teacher declining a request cancels it.
STATUS_ACTIONS = {
    "confirmed": "confirmed",
    "declined": "cancelled",
    "cancelled": "cancelled",
    "completed": "completed",
}


def book_session(
    db: Session,
    user: CurrentUser,
    teacher_id: str,
    skill: str,
    scheduled_at: datetime,
    duration_minutes: int = 60,
    notes: str | None = None,
) -> LearningSession:
    """Create a pending session with the caller as learner"""
    if teacher_id == user.id:
        raise ValidationError("You cannot book a session with yourself", field="teacher_id")

    skill = (skill or "").strip()
    if not skill:
        raise ValidationError("Skill is required", field="skill")

    if not MIN_DURATION_MINUTES <= duration_minutes <= MAX_DURATION_MINUTES:
        raise ValidationError(
            f"Duration must be between {MIN_DURATION_MINUTES} and {MAX_DURATION_MINUTES} minutes",
            field="duration_minutes",
        )

    if get_profile(db, teacher_id) is None:
        raise NotFoundError("Teacher not found", {"teacher_id": teacher_id})

    session = LearningSession(
        teacher_id=teacher_id,
        learner_id=user.id,
        skill=skill,
        scheduled_at=to_naive_utc(scheduled_at),
        duration_minutes=duration_minutes,
        notes=(notes or "").strip() or None,
        status="pending",
    )
    db.add(session)
    db.commit()
    db.refresh(session)

    logger.info("Session %s requested: %s -> %s (%s)", session.id, user.id, teacher_id, skill)
    return session


def get_session_for(db: Session, user: CurrentUser, session_id: str) -> LearningSession:
    session = db.query(LearningSession).filter(LearningSession.id == session_id).first()
    if session is None:
        raise NotFoundError("Session not found", {"session_id": session_id})
    if user.id not in (session.teacher_id, session.learner_id):
        raise PermissionDeniedError("Not a participant of this session")
    return session


def list_sessions(db: Session, user: CurrentUser, status: str | None = None) -> list[dict]:
    query = db.query(LearningSession).filter(
        or_(LearningSession.teacher_id == user.id, LearningSession.learner_id == user.id)
    )
    if status:
        if status not in SESSION_STATUSES:
            raise ValidationError(f"Unknown status: {status}", field="status")
        query = query.filter(LearningSession.status == status)

    sessions = query.order_by(LearningSession.scheduled_at.asc()).all()
    partners = {s.learner_id if s.teacher_id == user.id else s.teacher_id for s in sessions}
    names = display_names(db, partners)

    result = []
    for s in sessions:
        is_teacher = s.teacher_id == user.id
        partner_id = s.learner_id if is_teacher else s.teacher_id
        result.append({
            "session": s,
            "role": "teacher" if is_teacher else "learner",
            "partner_id": partner_id,
            "partner_name": names.get(partner_id, "Unknown"),
        })
    return result


def update_session_status(
    db: Session,
    user: CurrentUser,
    session_id: str,
    action: str,
    meetings: WherebyClient | None = None,
) -> LearningSession:
    """
    Apply a status action. Confirming a session without a meeting link
    provisions a video room first; if that fails nothing is written.
    """
    if action not in STATUS_ACTIONS:
        raise ValidationError(f"Unknown status: {action}", field="status")

    session = get_session_for(db, user, session_id)

    if action == "confirmed" and not session.meeting_link:
        meetings = meetings or WherebyClient()
        end = session.scheduled_at + timedelta(minutes=session.duration_minutes)
        room = meetings.create_meeting(session.scheduled_at, end)
        session.meeting_link = room["roomUrl"]

    session.status = STATUS_ACTIONS[action]
    session.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(session)

    logger.info("Session %s -> %s by %s", session.id, session.status, user.id)
    return session


def delete_session(db: Session, user: CurrentUser, session_id: str) -> None:
    session = get_session_for(db, user, session_id)
    db.delete(session)
    db.commit()
