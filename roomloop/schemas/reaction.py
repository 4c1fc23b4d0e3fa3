from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .base import DocumentResponse
from .message import MessageReactionResponse


class ReactionCreate(BaseModel):
    """채팅방 반응 생성 스키마"""
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(..., alias="roomId", min_length=1, description="채팅방 ID")
    emoji: str = Field(..., description="이모지")


class ReactionResponse(DocumentResponse):
    """채팅방 반응 응답 스키마"""
    room_id: str = Field(..., description="채팅방 ID")
    user_id: str = Field(..., description="반응한 사용자 ID")
    username: str = Field(..., description="반응한 사용자명")
    emoji: str = Field(..., description="이모지")
    created_at: datetime = Field(..., description="생성일시")


class MessageReactionToggle(BaseModel):
    """메시지 반응 토글 스키마"""
    emoji: str = Field(..., description="이모지")


class MessageReactionResult(BaseModel):
    """
    메시지 반응 토글 결과

    sendMessageReaction 릴레이에 그대로 넘길 수 있는 형태입니다.
    """
    model_config = ConfigDict(populate_by_name=True)

    message_id: str = Field(..., alias="messageId", description="메시지 ID")
    reaction: Optional[MessageReactionResponse] = Field(None, description="현재 반응 (제거 시 제거된 반응)")
    removed: bool = Field(default=False, description="같은 이모지를 다시 눌러 제거됨")
    updated: bool = Field(default=False, description="다른 이모지로 교체됨")
