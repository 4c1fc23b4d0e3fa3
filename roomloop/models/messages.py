from datetime import datetime
from typing import List, Optional
from beanie import Document
from pydantic import BaseModel, Field


class MessageReactionEntry(BaseModel):
    """메시지에 달린 사용자별 이모지 반응 (사용자당 하나)"""
    user_id: str
    username: str
    emoji: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Message(Document):
    room_id: str = Field(..., description="Room ID where message was sent")
    user_id: str = Field(..., description="User ID who sent the message")
    username: str = Field(..., description="Username who sent the message")
    text: str = Field(..., description="Message text")
    reactions: List[MessageReactionEntry] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "messages"
        indexes = [
            [("room_id", 1), ("created_at", -1)],  # For room message history
            [("user_id", 1), ("created_at", -1)],  # For user message history
        ]

    def find_reaction(self, user_id: str) -> Optional[MessageReactionEntry]:
        for entry in self.reactions:
            if entry.user_id == user_id:
                return entry
        return None

    def __repr__(self):
        return f"<Message(id={self.id}, user_id={self.user_id}, room_id={self.room_id})>"
