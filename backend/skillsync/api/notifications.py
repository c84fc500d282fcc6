# skillsync/api/notifications.py

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from skillsync.api.deps import get_email_client, get_push_client
from skillsync.clients.fcm import FCMClient
from skillsync.clients.resend import ResendClient
from skillsync.core.security import CurrentUser, get_current_user, require_service_key
from skillsync.core.session import get_session_for
from skillsync.infra.postgres import get_db
from skillsync.services import notifications

router = APIRouter(prefix="/notifications")


class PushSchema(BaseModel):
    user_id: str
    title: str
    body: str
    data: dict[str, str] = Field(default_factory=dict)


class SessionStatusSchema(BaseModel):
    session_id: str
    status: str


@router.post("/push", dependencies=[Depends(require_service_key)])
def send_push(
    payload: PushSchema,
    db: Session = Depends(get_db),
    fcm: FCMClient = Depends(get_push_client),
):
    return notifications.send_push_to_user(
        db, payload.user_id, payload.title, payload.body, payload.data, fcm=fcm
    )


@router.post("/session-status")
def send_session_status(
    payload: SessionStatusSchema,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    email: ResendClient = Depends(get_email_client),
):
    get_session_for(db, user, payload.session_id)
    return notifications.send_session_status_notification(
        db, payload.session_id, payload.status, email=email
    )


@router.post("/session-reminders", dependencies=[Depends(require_service_key)])
def run_session_reminders(
    db: Session = Depends(get_db),
    email: ResendClient = Depends(get_email_client),
    fcm: FCMClient = Depends(get_push_client),
):
    return notifications.send_session_reminders(db, email=email, fcm=fcm)


@router.post("/weekly-digest", dependencies=[Depends(require_service_key)])
def run_weekly_digest(
    db: Session = Depends(get_db),
    email: ResendClient = Depends(get_email_client),
):
    return notifications.send_weekly_digest(db, email=email)
