from skillsync.models.base import Base
from skillsync.models.conversation import Conversation, Message
from skillsync.models.device_token import DeviceToken
from skillsync.models.profile import Profile
from skillsync.models.review import Review
from skillsync.models.session import LearningSession

__all__ = [
    "Base",
    "Conversation",
    "DeviceToken",
    "LearningSession",
    "Message",
    "Profile",
    "Review",
]
