# skillsync/api/profiles.py

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from skillsync.api.serializers import own_profile, public_profile, review_out
from skillsync.core.profile import get_or_create_profile, get_public_profile, update_profile
from skillsync.core.security import CurrentUser, get_current_user
from skillsync.infra.postgres import get_db

router = APIRouter(prefix="/profiles")


class UpdateProfileSchema(BaseModel):
    full_name: str
    bio: str | None = None
    skills_to_teach: list[str] = Field(default_factory=list)
    skills_to_learn: list[str] = Field(default_factory=list)
    availability: dict | None = None
    email_digest_enabled: bool | None = None
    session_reminder_enabled: bool | None = None
    session_notification_enabled: bool | None = None


@router.get("/me")
def read_my_profile(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return own_profile(get_or_create_profile(db, user))


@router.put("/me")
def update_my_profile(
    payload: UpdateProfileSchema,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    profile = update_profile(
        db,
        user,
        full_name=payload.full_name,
        bio=payload.bio,
        skills_to_teach=payload.skills_to_teach,
        skills_to_learn=payload.skills_to_learn,
        availability=payload.availability,
        preferences={
            "email_digest_enabled": payload.email_digest_enabled,
            "session_reminder_enabled": payload.session_reminder_enabled,
            "session_notification_enabled": payload.session_notification_enabled,
        },
    )
    return own_profile(profile)


@router.get("/{user_id}")
def read_public_profile(
    user_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = get_public_profile(db, user_id)
    return {
        **public_profile(data["profile"]),
        "sessions_taught": data["sessions_taught"],
        "average_rating": data["average_rating"],
        "reviews": [
            {**r, "created_at": r["created_at"].isoformat()} for r in data["reviews"]
        ],
    }
