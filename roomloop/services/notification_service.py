"""
Notification service layer for MongoDB operations.
"""

from typing import Any, Dict, List, Optional

from beanie import PydanticObjectId
from beanie.operators import Set
from bson.errors import InvalidId
from pymongo import DESCENDING

from roomloop.models.notifications import Notification


async def create_notification(
    user_id: str,
    type: str,
    title: str,
    message: str,
    data: Optional[Dict[str, Any]] = None
) -> Notification:
    """알림 생성"""
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        data=data,
    )
    await notification.insert()
    return notification


async def find_notification_by_id(notification_id: str) -> Optional[Notification]:
    try:
        return await Notification.get(PydanticObjectId(notification_id))
    except (InvalidId, TypeError):
        return None


async def get_user_notifications(user_id: str, limit: int = 50) -> List[Notification]:
    """사용자 알림 목록 (최신순)"""
    return await Notification.find(
        Notification.user_id == user_id
    ).sort([("created_at", DESCENDING)]).limit(limit).to_list()


async def count_unread(user_id: str) -> int:
    return await Notification.find(
        Notification.user_id == user_id,
        Notification.is_read == False  # noqa: E712
    ).count()


async def mark_as_read(notification: Notification) -> Notification:
    if not notification.is_read:
        notification.is_read = True
        await notification.save()
    return notification


async def mark_all_as_read(user_id: str) -> int:
    """사용자의 모든 알림 읽음 처리, 변경된 개수 반환"""
    result = await Notification.find(
        Notification.user_id == user_id,
        Notification.is_read == False  # noqa: E712
    ).update(Set({Notification.is_read: True}))
    return getattr(result, "modified_count", 0) or 0
