from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .base import DocumentResponse


class InvitationCreate(BaseModel):
    """초대 생성 스키마"""
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(..., alias="roomId", min_length=1, description="채팅방 ID")
    invitee_id: str = Field(..., alias="inviteeId", min_length=1, description="초대받을 사용자 ID")


class InvitationResponse(DocumentResponse):
    """초대 응답 스키마"""
    room_id: str = Field(..., description="채팅방 ID")
    room_name: str = Field(..., description="채팅방 이름")
    inviter_id: str = Field(..., description="초대한 사용자 ID")
    inviter_username: str = Field(..., description="초대한 사용자명")
    invitee_id: str = Field(..., description="초대받은 사용자 ID")
    status: str = Field(..., description="pending, accepted, declined")
    created_at: datetime = Field(..., description="생성일시")
    responded_at: Optional[datetime] = Field(None, description="응답일시")
