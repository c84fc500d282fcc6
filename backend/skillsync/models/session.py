# skillsync/models/session.py

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text

from skillsync.models.base import Base, new_id

SESSION_STATUSES = ("pending", "confirmed", "cancelled", "completed")


class LearningSession(Base):
    """A booked teaching session between two profiles."""

    __tablename__ = "sessions"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="valid_status",
        ),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    scheduled_at = Column(DateTime, nullable=False, index=True)
    duration_minutes = Column(Integer, nullable=False, default=60)

    teacher_id = Column(String(36), nullable=False, index=True)
    learner_id = Column(String(36), nullable=False, index=True)
    skill = Column(String(200), nullable=False)

    status = Column(String(20), nullable=False, default="pending")
    notes = Column(Text, nullable=True)
    meeting_link = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
