# skillsync/core/device_token.py

from datetime import datetime

from sqlalchemy.orm import Session

from skillsync.core.exceptions import ValidationError
from skillsync.core.security import CurrentUser
from skillsync.models.device_token import PLATFORMS, DeviceToken


def register_device_token(db: Session, user: CurrentUser, token: str, platform: str) -> DeviceToken:
    """Insert or refresh (user_id, token)"""
    token = (token or "").strip()
    if not token:
        raise ValidationError("Device token is required", field="token")
    if platform not in PLATFORMS:
        raise ValidationError(f"Unknown platform: {platform}", field="platform")

    device = (
        db.query(DeviceToken)
        .filter(DeviceToken.user_id == user.id, DeviceToken.token == token)
        .first()
    )
    if device:
        device.platform = platform
        device.updated_at = datetime.utcnow()
    else:
        device = DeviceToken(user_id=user.id, token=token, platform=platform)
        db.add(device)

    db.commit()
    db.refresh(device)
    return device


def list_device_tokens(db: Session, user_id: str) -> list[DeviceToken]:
    return db.query(DeviceToken).filter(DeviceToken.user_id == user_id).all()


def unregister_device_tokens(db: Session, user: CurrentUser, token: str | None = None) -> int:
    """Remove one token, or every token of the caller when none is given."""
    query = db.query(DeviceToken).filter(DeviceToken.user_id == user.id)
    if token:
        query = query.filter(DeviceToken.token == token)
    removed = query.delete(synchronize_session=False)
    db.commit()
    return removed
