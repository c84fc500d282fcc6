# skillsync/api/stats.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillsync.core.security import CurrentUser, get_current_user
from skillsync.core.stats import dashboard_stats, leaderboard
from skillsync.infra.postgres import get_db

router = APIRouter()


@router.get("/dashboard")
def my_dashboard(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return dashboard_stats(db, user.id)


@router.get("/leaderboard")
def read_leaderboard(
    sort_by: str = "satisfaction",
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return leaderboard(db, sort_by)
