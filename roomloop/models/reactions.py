from datetime import datetime
from beanie import Document
from pydantic import Field


class Reaction(Document):
    """채팅방 전체에 보내는 이모지 반응 (특정 메시지에 달리지 않음)"""
    room_id: str = Field(..., description="Room ID where the reaction was sent")
    user_id: str = Field(..., description="User ID who reacted")
    username: str = Field(..., description="Username who reacted")
    emoji: str = Field(..., description="Emoji")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "reactions"
        indexes = [
            [("room_id", 1), ("created_at", -1)],
        ]

    def __repr__(self):
        return f"<Reaction(id={self.id}, room_id={self.room_id}, emoji={self.emoji})>"
