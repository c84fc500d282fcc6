# skillsync/services/notifications.py

import logging
from datetime import datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.orm import Session

from skillsync.clients.fcm import FCMClient
from skillsync.clients.resend import ResendClient
from skillsync.core.device_token import list_device_tokens
from skillsync.core.exceptions import NotFoundError, SkillSyncError, ValidationError
from skillsync.core.profile import display_names, get_profile
from skillsync.core.stats import round1
from skillsync.models.profile import Profile
from skillsync.models.review import Review
from skillsync.models.session import LearningSession
from skillsync.services import email_templates
from skillsync.utils.dates import format_session_time, format_short_time

logger = logging.getLogger(__name__)

REMINDER_WINDOW_START = timedelta(minutes=55)
REMINDER_WINDOW_END = timedelta(minutes=65)
DIGEST_PERIOD = timedelta(days=7)
DIGEST_UPCOMING_LIMIT = 5
DEFAULT_DURATION_MINUTES = 60

NOTIFIABLE_STATUSES = ("confirmed", "declined")


def _wants(profile: Profile | None, preference: str) -> bool:
    # Only an explicit opt-out suppresses mail
    return bool(profile and profile.email) and getattr(profile, preference) is not False


def _try_send(email: ResendClient, to: str, subject: str, html: str) -> bool:
    try:
        email.send_email(to, subject, html)
        return True
    except SkillSyncError as e:
        logger.error("Failed to send email to %s: %s", to, e)
        return False


# =========================
# PUSH
# =========================

def send_push_to_user(
    db: Session,
    user_id: str,
    title: str,
    body: str,
    data: dict | None = None,
    fcm: FCMClient | None = None,
) -> dict:
    tokens = list_device_tokens(db, user_id)
    if not tokens:
        logger.info("No device tokens found for user %s", user_id)
        return {"success": True, "sent": 0, "message": "No device tokens found"}

    fcm = fcm or FCMClient()
    sent = sum(1 for t in tokens if fcm.send(t.token, title, body, data))

    logger.info("Sent %d/%d push notifications to %s", sent, len(tokens), user_id)
    return {"success": True, "sent": sent, "total": len(tokens)}


# =========================
# SESSION STATUS
# =========================

def send_session_status_notification(
    db: Session,
    session_id: str,
    status: str,
    email: ResendClient | None = None,
) -> dict:
    if not session_id or not status:
        raise ValidationError("Missing sessionId or status")
    if status not in NOTIFIABLE_STATUSES:
        raise ValidationError("Status must be either confirmed or declined", field="status")

    session = db.query(LearningSession).filter(LearningSession.id == session_id).first()
    if session is None:
        raise NotFoundError("Session not found", {"session_id": session_id})

    logger.info("Sending %s notification for session %s", status, session_id)
    email = email or ResendClient()
    teacher = get_profile(db, session.teacher_id)
    learner = get_profile(db, session.learner_id)
    session_time = format_session_time(session.scheduled_at)
    sent = 0

    if status == "confirmed":
        for recipient, partner, is_teacher in ((teacher, learner, True), (learner, teacher, False)):
            if not _wants(recipient, "session_notification_enabled"):
                continue
            subject, html = email_templates.session_confirmed_email(
                recipient_name=recipient.full_name,
                is_teacher=is_teacher,
                partner_name=partner.full_name if partner else None,
                skill=session.skill,
                session_time=session_time,
                duration_minutes=session.duration_minutes,
                meeting_link=session.meeting_link,
                notes=session.notes,
            )
            if _try_send(email, recipient.email, subject, html):
                sent += 1
    elif _wants(learner, "session_notification_enabled"):
        subject, html = email_templates.session_declined_email(
            learner_name=learner.full_name,
            teacher_name=teacher.full_name if teacher else None,
            skill=session.skill,
            session_time=session_time,
        )
        if _try_send(email, learner.email, subject, html):
            sent += 1

    return {"success": True, "status": status, "emailsSent": sent}


# =========================
# REMINDERS
# =========================

def sessions_due_for_reminder(db: Session, now: datetime) -> list[LearningSession]:
    return (
        db.query(LearningSession)
        .filter(
            LearningSession.status == "confirmed",
            LearningSession.meeting_link.isnot(None),
            LearningSession.scheduled_at >= now + REMINDER_WINDOW_START,
            LearningSession.scheduled_at <= now + REMINDER_WINDOW_END,
        )
        .order_by(LearningSession.scheduled_at)
        .all()
    )


def send_session_reminders(
    db: Session,
    now: datetime | None = None,
    email: ResendClient | None = None,
    fcm: FCMClient | None = None,
) -> dict:
    now = now or datetime.utcnow()
    sessions = sessions_due_for_reminder(db, now)
    logger.info("Found %d sessions to send reminders for", len(sessions))

    email = email or ResendClient()
    fcm = fcm or FCMClient()
    push_enabled = fcm.configured
    if push_enabled:
        try:
            fcm.get_access_token()
        except SkillSyncError as e:
            logger.error("Error getting FCM access token: %s", e)
            push_enabled = False

    emails_sent = 0
    push_sent = 0

    for session in sessions:
        teacher = get_profile(db, session.teacher_id)
        learner = get_profile(db, session.learner_id)
        session_time = format_session_time(session.scheduled_at)

        for recipient, partner, is_teacher in ((teacher, learner, True), (learner, teacher, False)):
            if _wants(recipient, "session_reminder_enabled"):
                subject, html = email_templates.session_reminder_email(
                    recipient_name=recipient.full_name,
                    is_teacher=is_teacher,
                    partner_name=partner.full_name if partner else None,
                    skill=session.skill,
                    session_time=session_time,
                    duration_minutes=session.duration_minutes,
                    meeting_link=session.meeting_link,
                    notes=session.notes,
                )
                if _try_send(email, recipient.email, subject, html):
                    emails_sent += 1

            if recipient is None or not push_enabled:
                continue

            partner_name = partner.full_name if partner and partner.full_name else None
            if is_teacher:
                title = f"Session in 1 hour: Teaching {session.skill}"
                body = f"Your session with {partner_name or 'a student'} starts soon!"
            else:
                title = f"Session in 1 hour: Learning {session.skill}"
                body = f"Your session with {partner_name or 'your teacher'} starts soon!"

            for device in list_device_tokens(db, recipient.id):
                if fcm.send(
                    device.token, title, body,
                    {"sessionId": session.id, "type": "session_reminder"},
                ):
                    push_sent += 1

    return {
        "success": True,
        "sessionsFound": len(sessions),
        "emailsSent": emails_sent,
        "pushSent": push_sent,
    }


# =========================
# WEEKLY DIGEST
# =========================

def build_digest(db: Session, user: Profile, now: datetime) -> dict | None:
    """Weekly activity for one user, or None when there is nothing to report."""
    since = now - DIGEST_PERIOD

    def completed_as(column):
        return (
            db.query(LearningSession)
            .filter(
                column == user.id,
                LearningSession.status == "completed",
                LearningSession.scheduled_at >= since,
            )
            .all()
        )

    taught = completed_as(LearningSession.teacher_id)
    learned = completed_as(LearningSession.learner_id)

    upcoming = (
        db.query(LearningSession)
        .filter(
            or_(LearningSession.teacher_id == user.id, LearningSession.learner_id == user.id),
            LearningSession.status == "confirmed",
            LearningSession.scheduled_at >= now,
        )
        .order_by(LearningSession.scheduled_at.asc())
        .limit(DIGEST_UPCOMING_LIMIT)
        .all()
    )

    reviews = (
        db.query(Review)
        .filter(Review.reviewee_id == user.id, Review.created_at >= since)
        .order_by(Review.created_at.desc())
        .all()
    )

    if not (taught or learned or reviews or upcoming):
        return None

    def hours(sessions):
        return sum((s.duration_minutes or DEFAULT_DURATION_MINUTES) for s in sessions) / 60

    def distinct_skills(sessions):
        return list(dict.fromkeys(s.skill for s in sessions))

    partner_ids = [s.learner_id if s.teacher_id == user.id else s.teacher_id for s in upcoming]
    names = display_names(db, partner_ids)

    return {
        "sessions_taught": len(taught),
        "sessions_learned": len(learned),
        "hours_taught": hours(taught),
        "hours_learned": hours(learned),
        "skills_taught": distinct_skills(taught),
        "skills_learned": distinct_skills(learned),
        "average_rating": (
            round1(sum(r.rating for r in reviews) / len(reviews)) if reviews else None
        ),
        "reviews": [{"rating": r.rating, "comment": r.comment} for r in reviews],
        "upcoming": [
            {
                "skill": s.skill,
                "role_label": "Teaching" if s.teacher_id == user.id else "Learning",
                "partner_name": names.get(partner_id, "Unknown"),
                "when": format_short_time(s.scheduled_at),
            }
            for s, partner_id in zip(upcoming, partner_ids)
        ],
    }


def send_weekly_digest(
    db: Session,
    now: datetime | None = None,
    email: ResendClient | None = None,
) -> dict:
    logger.info("Starting weekly digest send")
    now = now or datetime.utcnow()
    email = email or ResendClient()

    users = (
        db.query(Profile)
        .filter(
            Profile.profile_completed.is_(True),
            Profile.email_digest_enabled.is_(True),
            Profile.email.isnot(None),
        )
        .all()
    )
    logger.info("Found %d users to send digests to", len(users))

    emails_sent = 0
    errors: list[str] = []

    for user in users:
        if not user.email:
            continue
        try:
            digest = build_digest(db, user, now)
            if digest is None:
                logger.debug("Skipping %s - no activity this week", user.email)
                continue
            subject, html = email_templates.weekly_digest_email(user.full_name, digest)
            email.send_email(user.email, subject, html)
            emails_sent += 1
        except SkillSyncError as e:
            logger.error("Error sending digest to %s: %s", user.email, e)
            errors.append(f"{user.email}: {e.message}")

    logger.info("Weekly digest complete. Sent %d emails.", emails_sent)

    result = {"success": True, "emailsSent": emails_sent}
    if errors:
        result["errors"] = errors
    return result
