from .users import User
from .rooms import Room
from .invitations import Invitation
from .messages import Message, MessageReactionEntry
from .reactions import Reaction
from .notifications import Notification

DOCUMENT_MODELS = [
    User,
    Room,
    Invitation,
    Message,
    Reaction,
    Notification,
]

__all__ = [
    "User",
    "Room",
    "Invitation",
    "Message",
    "MessageReactionEntry",
    "Reaction",
    "Notification",
    "DOCUMENT_MODELS",
]
