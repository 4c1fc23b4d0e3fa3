from datetime import datetime
from typing import Optional
from beanie import Document
from pydantic import Field

INVITATION_PENDING = "pending"
INVITATION_ACCEPTED = "accepted"
INVITATION_DECLINED = "declined"


class Invitation(Document):
    room_id: str = Field(..., description="Room ID the invitation is for")
    room_name: str = Field(..., description="Room name at the time of invitation")
    inviter_id: str = Field(..., description="User ID who sent the invitation")
    inviter_username: str = Field(..., description="Username who sent the invitation")
    invitee_id: str = Field(..., description="User ID who received the invitation")
    status: str = Field(default=INVITATION_PENDING, description="pending, accepted or declined")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    responded_at: Optional[datetime] = Field(None, description="When the invitee responded")

    class Settings:
        name = "invitations"
        indexes = [
            [("invitee_id", 1), ("status", 1), ("created_at", -1)],  # For pending inbox
            [("room_id", 1), ("invitee_id", 1)],  # For duplicate checks
        ]

    def respond(self, accepted: bool):
        self.status = INVITATION_ACCEPTED if accepted else INVITATION_DECLINED
        self.responded_at = datetime.utcnow()

    def __repr__(self):
        return f"<Invitation(id={self.id}, room_id={self.room_id}, invitee_id={self.invitee_id}, status={self.status})>"
