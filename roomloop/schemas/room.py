from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from roomloop.utils.time_utils import to_naive_utc
from .base import DocumentResponse


class RoomCreate(BaseModel):
    """채팅방 생성 스키마"""
    name: str = Field(..., min_length=1, max_length=100, description="채팅방 이름")
    description: Optional[str] = Field(None, max_length=500, description="설명")
    starts_at: datetime = Field(..., description="시작 시각")
    ends_at: datetime = Field(..., description="종료 시각")
    is_private: bool = Field(default=False, description="초대 전용 여부")
    max_participants: Optional[int] = Field(None, ge=2, le=100, description="최대 참여자 수")
    tags: List[str] = Field(default_factory=list, max_length=10, description="태그")

    @field_validator("starts_at", "ends_at")
    @classmethod
    def normalize_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, tags: List[str]) -> List[str]:
        cleaned = []
        for tag in tags:
            tag = tag.strip().lower()
            if tag and tag not in cleaned:
                cleaned.append(tag)
        return cleaned


class RoomResponse(DocumentResponse):
    """채팅방 응답 스키마"""
    name: str = Field(..., description="채팅방 이름")
    description: Optional[str] = Field(None, description="설명")
    host_id: str = Field(..., description="호스트 사용자 ID")
    host_username: str = Field(..., description="호스트 사용자명")
    starts_at: datetime = Field(..., description="시작 시각")
    ends_at: datetime = Field(..., description="종료 시각")
    is_private: bool = Field(..., description="초대 전용 여부")
    max_participants: Optional[int] = Field(None, description="최대 참여자 수")
    participants: List[str] = Field(default_factory=list, description="참여자 ID 목록")
    participant_count: int = Field(..., description="참여자 수")
    tags: List[str] = Field(default_factory=list, description="태그")
    status: str = Field(..., description="scheduled, live, ended")
    created_at: datetime = Field(..., description="생성일시")


class RoomPresence(BaseModel):
    """채팅방 실시간 접속 현황 스키마"""
    room_id: str = Field(..., description="채팅방 ID")
    online_users: List[str] = Field(..., description="접속 중인 사용자 ID")
    online_count: int = Field(..., description="접속 중인 사용자 수")
    is_active: bool = Field(..., description="접속자 존재 여부")
