from datetime import datetime
from typing import List
from pydantic import BaseModel, ConfigDict, Field

from .base import DocumentResponse


class MessageCreate(BaseModel):
    """메시지 생성 스키마"""
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(..., alias="roomId", min_length=1, description="채팅방 ID")
    text: str = Field(..., description="메시지 내용")


class MessageReactionResponse(BaseModel):
    """메시지 반응 스키마"""
    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(..., description="반응한 사용자 ID")
    username: str = Field(..., description="반응한 사용자명")
    emoji: str = Field(..., description="이모지")


class MessageResponse(DocumentResponse):
    """메시지 응답 스키마"""
    room_id: str = Field(..., description="채팅방 ID")
    user_id: str = Field(..., description="발신자 ID")
    username: str = Field(..., description="발신자 사용자명")
    text: str = Field(..., description="메시지 내용")
    reactions: List[MessageReactionResponse] = Field(default_factory=list, description="반응 목록")
    created_at: datetime = Field(..., description="생성일시")
    updated_at: datetime = Field(..., description="수정일시")


class MessageList(BaseModel):
    """메시지 목록 스키마"""
    messages: List[MessageResponse] = Field(..., description="메시지 목록 (오래된 순)")
    total: int = Field(..., description="전체 메시지 수")
    limit: int = Field(..., description="조회 개수")
    skip: int = Field(..., description="건너뛴 개수")
    has_next: bool = Field(..., description="이전 메시지 존재 여부")
