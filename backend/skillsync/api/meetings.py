# skillsync/api/meetings.py

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from skillsync.api.deps import get_meeting_client
from skillsync.clients.whereby import WherebyClient
from skillsync.core.exceptions import ValidationError
from skillsync.core.security import CurrentUser, get_current_user

router = APIRouter(prefix="/meetings")


class CreateMeetingSchema(BaseModel):
    session_id: str | None = None
    start_date: datetime
    end_date: datetime


@router.post("")
def create_meeting(
    payload: CreateMeetingSchema,
    user: CurrentUser = Depends(get_current_user),
    meetings: WherebyClient = Depends(get_meeting_client),
):
    """Provision a video room directly; session confirmation does this itself."""
    if payload.end_date <= payload.start_date:
        raise ValidationError("endDate must be after startDate", field="end_date")
    return meetings.create_meeting(payload.start_date, payload.end_date)
