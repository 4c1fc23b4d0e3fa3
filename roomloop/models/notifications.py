from datetime import datetime
from typing import Any, Dict, Optional
from beanie import Document
from pydantic import Field


class Notification(Document):
    user_id: str = Field(..., description="Recipient user ID")
    type: str = Field(..., description="Notification type, e.g. room_invitation")
    title: str = Field(..., description="Short title")
    message: str = Field(..., description="Notification body")
    data: Optional[Dict[str, Any]] = Field(None, description="Type specific payload")
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "notifications"
        indexes = [
            [("user_id", 1), ("is_read", 1), ("created_at", -1)],
        ]

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, type={self.type})>"
