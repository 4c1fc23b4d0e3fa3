from .user import UserCreate, UserLogin, UserResponse, UserProfile, UserSearchResponse, Token
from .room import RoomCreate, RoomResponse, RoomPresence
from .invitation import InvitationCreate, InvitationResponse
from .message import MessageCreate, MessageResponse, MessageReactionResponse, MessageList
from .reaction import ReactionCreate, ReactionResponse, MessageReactionToggle, MessageReactionResult
from .notification import NotificationResponse, NotificationList

__all__ = [
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserProfile",
    "UserSearchResponse",
    "Token",
    "RoomCreate",
    "RoomResponse",
    "RoomPresence",
    "InvitationCreate",
    "InvitationResponse",
    "MessageCreate",
    "MessageResponse",
    "MessageReactionResponse",
    "MessageList",
    "ReactionCreate",
    "ReactionResponse",
    "MessageReactionToggle",
    "MessageReactionResult",
    "NotificationResponse",
    "NotificationList",
]
