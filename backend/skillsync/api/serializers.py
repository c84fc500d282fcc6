# skillsync/api/serializers.py

from skillsync.models.conversation import Conversation, Message
from skillsync.models.device_token import DeviceToken
from skillsync.models.profile import Profile
from skillsync.models.review import Review
from skillsync.models.session import LearningSession


def _ts(value):
    return value.isoformat() if value else None


def public_profile(p: Profile) -> dict:
    return {
        "id": p.id,
        "full_name": p.full_name,
        "bio": p.bio,
        "skills_to_teach": p.skills_to_teach or [],
        "skills_to_learn": p.skills_to_learn or [],
        "availability": p.availability or {},
    }


def own_profile(p: Profile) -> dict:
    return {
        **public_profile(p),
        "email": p.email,
        "profile_completed": p.profile_completed,
        "email_digest_enabled": p.email_digest_enabled,
        "session_reminder_enabled": p.session_reminder_enabled,
        "session_notification_enabled": p.session_notification_enabled,
        "created_at": _ts(p.created_at),
        "updated_at": _ts(p.updated_at),
    }


def session_out(s: LearningSession) -> dict:
    return {
        "id": s.id,
        "teacher_id": s.teacher_id,
        "learner_id": s.learner_id,
        "skill": s.skill,
        "scheduled_at": _ts(s.scheduled_at),
        "duration_minutes": s.duration_minutes,
        "status": s.status,
        "notes": s.notes,
        "meeting_link": s.meeting_link,
        "created_at": _ts(s.created_at),
        "updated_at": _ts(s.updated_at),
    }


def review_out(r: Review, reviewer_name: str | None = None) -> dict:
    out = {
        "id": r.id,
        "session_id": r.session_id,
        "reviewer_id": r.reviewer_id,
        "reviewee_id": r.reviewee_id,
        "rating": r.rating,
        "comment": r.comment,
        "created_at": _ts(r.created_at),
    }
    if reviewer_name is not None:
        out["reviewer_name"] = reviewer_name
    return out


def conversation_out(c: Conversation) -> dict:
    return {
        "id": c.id,
        "participant_1_id": c.participant_1_id,
        "participant_2_id": c.participant_2_id,
        "last_message_at": _ts(c.last_message_at),
        "updated_at": _ts(c.updated_at),
    }


def message_out(m: Message) -> dict:
    return {
        "id": m.id,
        "conversation_id": m.conversation_id,
        "sender_id": m.sender_id,
        "content": m.content,
        "read": m.read,
        "created_at": _ts(m.created_at),
    }


def device_out(d: DeviceToken) -> dict:
    return {
        "id": d.id,
        "token": d.token,
        "platform": d.platform,
        "updated_at": _ts(d.updated_at),
    }
