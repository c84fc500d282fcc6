# skillsync/api/devices.py

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from skillsync.api.serializers import device_out
from skillsync.core.circuit_breaker import DEVICE_REGISTER_LIMIT, limiter
from skillsync.core.device_token import (
    list_device_tokens,
    register_device_token,
    unregister_device_tokens,
)
from skillsync.core.security import CurrentUser, get_current_user
from skillsync.infra.postgres import get_db

router = APIRouter(prefix="/devices")


class RegisterDeviceSchema(BaseModel):
    token: str
    platform: str


@router.post("")
@limiter.limit(DEVICE_REGISTER_LIMIT)
def register_device(
    request: Request,
    payload: RegisterDeviceSchema,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return device_out(register_device_token(db, user, payload.token, payload.platform))


@router.get("")
def my_devices(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [device_out(d) for d in list_device_tokens(db, user.id)]


@router.delete("")
def unregister_devices(
    token: str | None = None,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Remove one token (?token=...) or all of the caller's tokens"""
    return {"removed": unregister_device_tokens(db, user, token)}
