# skillsync/models/conversation.py

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from skillsync.models.base import Base, new_id


class Conversation(Base):
    __tablename__ = "conversations"
    __table_args__ = (
        UniqueConstraint("participant_1_id", "participant_2_id", name="uq_conversation_participants"),
    )

    id = Column(String(36), primary_key=True, default=new_id)

    # Always stored with participant_1_id < participant_2_id
    participant_1_id = Column(String(36), nullable=False, index=True)
    participant_2_id = Column(String(36), nullable=False, index=True)

    last_message_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Message.created_at",
    )

    def other_participant(self, user_id: str) -> str:
        if self.participant_1_id == user_id:
            return self.participant_2_id
        return self.participant_1_id

    def has_participant(self, user_id: str) -> bool:
        return user_id in (self.participant_1_id, self.participant_2_id)


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=new_id)
    conversation_id = Column(
        String(36), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id = Column(String(36), nullable=False, index=True)
    content = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    conversation = relationship("Conversation", back_populates="messages")
