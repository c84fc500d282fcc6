from datetime import datetime

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from skillsync.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from skillsync.core.profile import display_names, get_profile
from skillsync.core.security import CurrentUser
from skillsync.models.conversation import Conversation, Message
from skillsync.services.relay_service import RelayHub, hub as default_hub

CONTENT_MAX = 2000


def ordered_pair(a: str, b: str) -> tuple[str, str]:
    return (a, b) if a < b else (b, a)


def message_event(message: Message) -> dict:
    """Realtime payload for a newly inserted message"""
    return {
        "event": "INSERT",
        "message": {
            "id": message.id,
            "conversation_id": message.conversation_id,
            "sender_id": message.sender_id,
            "content": message.content,
            "read": message.read,
            "created_at": message.created_at.isoformat(),
        },
    }


def get_or_create_conversation(db: Session, user: CurrentUser, other_user_id: str) -> Conversation:
    if not other_user_id or other_user_id == user.id:
        raise ValidationError("Cannot start a conversation with yourself", field="other_user_id")
    if get_profile(db, other_user_id) is None:
        raise NotFoundError("User not found", {"user_id": other_user_id})

    p1, p2 = ordered_pair(user.id, other_user_id)
    conversation = (
        db.query(Conversation)
        .filter(Conversation.participant_1_id == p1, Conversation.participant_2_id == p2)
        .first()
    )
    if conversation:
        return conversation

    conversation = Conversation(participant_1_id=p1, participant_2_id=p2)
    db.add(conversation)
    try:
        db.commit()
    except IntegrityError:
        # Created concurrently by the other participant
        db.rollback()
        return (
            db.query(Conversation)
            .filter(Conversation.participant_1_id == p1, Conversation.participant_2_id == p2)
            .one()
        )
    db.refresh(conversation)
    return conversation


def get_conversation_for(db: Session, user: CurrentUser, conversation_id: str) -> Conversation:
    conversation = db.query(Conversation).filter(Conversation.id == conversation_id).first()
    if conversation is None:
        raise NotFoundError("Conversation not found", {"conversation_id": conversation_id})
    if not conversation.has_participant(user.id):
        raise PermissionDeniedError("Not a participant of this conversation")
    return conversation


def send_message(
    db: Session,
    user: CurrentUser,
    content: str,
    conversation_id: str | None = None,
    other_user_id: str | None = None,
    relay: RelayHub | None = None,
) -> Message:
    """Store a message, creating the conversation when only the recipient is known"""
    content = (content or "").strip()
    if not content:
        raise ValidationError("Message cannot be empty", field="content")
    if len(content) > CONTENT_MAX:
        raise ValidationError(
            f"Message must be at most {CONTENT_MAX} characters", field="content"
        )

    if conversation_id:
        conversation = get_conversation_for(db, user, conversation_id)
    elif other_user_id:
        conversation = get_or_create_conversation(db, user, other_user_id)
    else:
        raise ValidationError("conversation_id or other_user_id is required")

    now = datetime.utcnow()
    message = Message(
        conversation_id=conversation.id,
        sender_id=user.id,
        content=content,
        created_at=now,
    )
    db.add(message)
    conversation.last_message_at = now
    conversation.updated_at = now
    db.commit()
    db.refresh(message)

    (relay or default_hub).publish(conversation.id, message_event(message))
    return message


def list_conversations(db: Session, user: CurrentUser) -> list[dict]:
    conversations = (
        db.query(Conversation)
        .filter(
            or_(
                Conversation.participant_1_id == user.id,
                Conversation.participant_2_id == user.id,
            )
        )
        .order_by(Conversation.updated_at.desc())
        .all()
    )
    names = display_names(db, (c.other_participant(user.id) for c in conversations))

    result = []
    for conv in conversations:
        other_id = conv.other_participant(user.id)

        last = (
            db.query(Message.content)
            .filter(Message.conversation_id == conv.id)
            .order_by(Message.created_at.desc())
            .first()
        )
        unread = (
            db.query(func.count(Message.id))
            .filter(
                Message.conversation_id == conv.id,
                Message.read.is_(False),
                Message.sender_id != user.id,
            )
            .scalar()
        )

        result.append({
            "conversation": conv,
            "other_user": {"id": other_id, "full_name": names.get(other_id, "Unknown User")},
            "last_message": last.content if last else None,
            "unread_count": unread or 0,
        })
    return result


def list_messages(db: Session, user: CurrentUser, conversation_id: str) -> list[Message]:
    get_conversation_for(db, user, conversation_id)
    return (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc())
        .all()
    )


def mark_read(db: Session, user: CurrentUser, conversation_id: str) -> int:
    get_conversation_for(db, user, conversation_id)
    updated = (
        db.query(Message)
        .filter(
            Message.conversation_id == conversation_id,
            Message.read.is_(False),
            Message.sender_id != user.id,
        )
        .update({Message.read: True}, synchronize_session=False)
    )
    db.commit()
    return updated
