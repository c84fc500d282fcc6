# skillsync/core/profile.py

from datetime import datetime

from sqlalchemy.orm import Session

from skillsync.core.exceptions import NotFoundError, ValidationError
from skillsync.core.security import CurrentUser
from skillsync.core.stats import round1
from skillsync.models.profile import Profile
from skillsync.models.review import Review
from skillsync.models.session import LearningSession

FULL_NAME_MAX = 100
BIO_MAX = 500

PREFERENCE_FIELDS = (
    "email_digest_enabled",
    "session_reminder_enabled",
    "session_notification_enabled",
)


def get_profile(db: Session, user_id: str) -> Profile | None:
    return db.query(Profile).filter(Profile.id == user_id).first()


def get_or_create_profile(db: Session, user: CurrentUser) -> Profile:
    """Return the caller's profile, creating it from token claims on first access"""
    profile = get_profile(db, user.id)
    if profile is None:
        profile = Profile(
            id=user.id,
            email=user.email,
            full_name=user.full_name or "",
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
    return profile


def clean_skills(skills: list[str] | None) -> list[str]:
    """Trim, drop blanks and duplicates, keep first-seen order."""
    cleaned: list[str] = []
    for skill in skills or []:
        skill = skill.strip()
        if skill and skill not in cleaned:
            cleaned.append(skill)
    return cleaned


def update_profile(
    db: Session,
    user: CurrentUser,
    full_name: str,
    bio: str | None = None,
    skills_to_teach: list[str] | None = None,
    skills_to_learn: list[str] | None = None,
    availability: dict | None = None,
    preferences: dict[str, bool] | None = None,
) -> Profile:
    full_name = (full_name or "").strip()
    if not full_name:
        raise ValidationError("Name is required", field="full_name")
    if len(full_name) > FULL_NAME_MAX:
        raise ValidationError(
            f"Name must be at most {FULL_NAME_MAX} characters", field="full_name"
        )

    bio = (bio or "").strip() or None
    if bio and len(bio) > BIO_MAX:
        raise ValidationError(f"Bio must be less than {BIO_MAX} characters", field="bio")

    teach = clean_skills(skills_to_teach)
    learn = clean_skills(skills_to_learn)
    if not teach and not learn:
        raise ValidationError("Please add at least one skill to teach or learn", field="skills")

    profile = get_or_create_profile(db, user)
    profile.full_name = full_name
    profile.bio = bio
    profile.skills_to_teach = teach
    profile.skills_to_learn = learn
    if availability is not None:
        profile.availability = availability

    for field, value in (preferences or {}).items():
        if field in PREFERENCE_FIELDS and value is not None:
            setattr(profile, field, bool(value))

    profile.profile_completed = True
    profile.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(profile)
    return profile


def get_completed_profile(db: Session, user_id: str) -> Profile:
    profile = (
        db.query(Profile)
        .filter(Profile.id == user_id, Profile.profile_completed.is_(True))
        .first()
    )
    if profile is None:
        raise NotFoundError("Profile not found", {"user_id": user_id})
    return profile


def display_names(db: Session, user_ids) -> dict[str, str]:
    """Map ids to full names; unknown or blank names are omitted."""
    ids = {uid for uid in user_ids if uid}
    if not ids:
        return {}
    rows = db.query(Profile.id, Profile.full_name).filter(Profile.id.in_(ids)).all()
    return {row.id: row.full_name for row in rows if row.full_name}


def get_public_profile(db: Session, user_id: str) -> dict:
    profile = get_completed_profile(db, user_id)

    reviews = (
        db.query(Review)
        .filter(Review.reviewee_id == user_id)
        .order_by(Review.created_at.desc())
        .all()
    )
    names = display_names(db, (r.reviewer_id for r in reviews))

    sessions_taught = (
        db.query(LearningSession)
        .filter(
            LearningSession.teacher_id == user_id,
            LearningSession.status == "completed",
        )
        .count()
    )

    average_rating = (
        round1(sum(r.rating for r in reviews) / len(reviews)) if reviews else 0
    )

    return {
        "profile": profile,
        "reviews": [
            {
                "id": r.id,
                "rating": r.rating,
                "comment": r.comment,
                "created_at": r.created_at,
                "reviewer_id": r.reviewer_id,
                "reviewer_name": names.get(r.reviewer_id, "Anonymous"),
            }
            for r in reviews
        ],
        "sessions_taught": sessions_taught,
        "average_rating": average_rating,
    }
