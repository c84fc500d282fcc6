# skillsync/api/matches.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillsync.api.serializers import public_profile
from skillsync.core.matching import find_matches, skills_directory
from skillsync.core.security import CurrentUser, get_current_user
from skillsync.infra.postgres import get_db

router = APIRouter()


@router.get("/matches")
def list_matches(
    search: str | None = None,
    skill: str | None = None,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Completed profiles other than the caller, filtered by name/bio and skill"""
    return [public_profile(p) for p in find_matches(db, user.id, search, skill)]


@router.get("/skills")
def list_skills(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return skills_directory(db)
