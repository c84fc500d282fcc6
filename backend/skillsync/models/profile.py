# skillsync/models/profile.py

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, String, Text

from skillsync.models.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the auth provider's user
    id = Column(String(36), primary_key=True, index=True)
    email = Column(String(320), nullable=True)
    full_name = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)

    skills_to_teach = Column(JSON, nullable=False, default=list)
    skills_to_learn = Column(JSON, nullable=False, default=list)
    availability = Column(JSON, nullable=False, default=dict)

    profile_completed = Column(Boolean, nullable=False, default=False, index=True)

    # Notification preferences
    email_digest_enabled = Column(Boolean, nullable=False, default=True)
    session_reminder_enabled = Column(Boolean, nullable=False, default=True)
    session_notification_enabled = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
