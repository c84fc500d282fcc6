# skillsync/models/device_token.py

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, String, Text, UniqueConstraint

from skillsync.models.base import Base, new_id

PLATFORMS = ("ios", "android", "web")


class DeviceToken(Base):
    __tablename__ = "device_tokens"
    __table_args__ = (
        UniqueConstraint("user_id", "token", name="uq_device_tokens_user_token"),
        CheckConstraint("platform IN ('ios', 'android', 'web')", name="valid_platform"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)
    token = Column(Text, nullable=False)
    platform = Column(String(10), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
