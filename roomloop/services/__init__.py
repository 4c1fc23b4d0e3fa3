"""
Services layer for data access.

This layer handles:
- MongoDB queries and operations (beanie documents)
- Data transformations for the API layer
"""

from . import auth_service
from . import room_service
from . import invitation_service
from . import message_service
from . import reaction_service
from . import notification_service

__all__ = [
    "auth_service",
    "room_service",
    "invitation_service",
    "message_service",
    "reaction_service",
    "notification_service",
]
