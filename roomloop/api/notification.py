from fastapi import APIRouter, Depends, Query

from roomloop.api.dependencies import get_current_user
from roomloop.core.errors import ResourceNotFoundException
from roomloop.realtime.auth import Identity
from roomloop.schemas.notification import NotificationResponse, NotificationList
from roomloop.services import notification_service

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationList)
async def get_notifications(
    limit: int = Query(50, ge=1, le=100),
    current_user: Identity = Depends(get_current_user)
) -> NotificationList:
    """내 알림 목록 (최신순)"""
    notifications = await notification_service.get_user_notifications(current_user.id, limit=limit)
    unread_count = await notification_service.count_unread(current_user.id)
    return NotificationList(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=unread_count,
    )


@router.put("/read-all")
async def mark_all_notifications_read(
    current_user: Identity = Depends(get_current_user)
):
    """모든 알림 읽음 처리"""
    updated = await notification_service.mark_all_as_read(current_user.id)
    return {"success": True, "updated": updated}


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    current_user: Identity = Depends(get_current_user)
) -> NotificationResponse:
    """알림 읽음 처리"""
    notification = await notification_service.find_notification_by_id(notification_id)
    if not notification or notification.user_id != current_user.id:
        raise ResourceNotFoundException("Notification")

    notification = await notification_service.mark_as_read(notification)
    return NotificationResponse.model_validate(notification)
