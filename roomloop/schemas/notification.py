from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from .base import DocumentResponse


class NotificationResponse(DocumentResponse):
    """알림 응답 스키마"""
    user_id: str = Field(..., description="수신자 ID")
    type: str = Field(..., description="알림 종류")
    title: str = Field(..., description="제목")
    message: str = Field(..., description="내용")
    data: Optional[Dict[str, Any]] = Field(None, description="알림 데이터")
    is_read: bool = Field(..., description="읽음 여부")
    created_at: datetime = Field(..., description="생성일시")


class NotificationList(BaseModel):
    """알림 목록 스키마"""
    notifications: List[NotificationResponse] = Field(..., description="알림 목록 (최신순)")
    unread_count: int = Field(..., description="읽지 않은 알림 수")
