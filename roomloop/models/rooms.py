from datetime import datetime
from typing import List, Optional
from beanie import Document
from pydantic import Field

from roomloop.utils.time_utils import room_status


class Room(Document):
    name: str = Field(..., description="Room name")
    description: Optional[str] = Field(None, description="Room description")
    host_id: str = Field(..., description="User ID of the host")
    host_username: str = Field(..., description="Username of the host")
    starts_at: datetime = Field(..., description="Scheduled start (UTC)")
    ends_at: datetime = Field(..., description="Scheduled end (UTC)")
    is_private: bool = Field(default=False, description="Invitation-only room")
    max_participants: Optional[int] = Field(None, description="Participant cap, None for unlimited")
    participants: List[str] = Field(default_factory=list, description="Participant user IDs (host included)")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "rooms"
        indexes = [
            [("starts_at", 1)],  # For upcoming room listing
            [("participants", 1)],  # For "my rooms"
            [("is_private", 1), ("ends_at", -1)],  # For public room discovery
        ]

    @property
    def status(self) -> str:
        return room_status(self.starts_at, self.ends_at)

    def is_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def is_full(self) -> bool:
        return self.max_participants is not None and len(self.participants) >= self.max_participants

    def __repr__(self):
        return f"<Room(id={self.id}, name={self.name}, host_id={self.host_id})>"
