"""REST 계층에서 저장을 마친 레코드를 개인 알림 채널로 내보냅니다."""

import logging
from typing import Any, Dict

from roomloop.realtime.broadcaster import RoomBroadcaster
from roomloop.realtime.errors import RelayError
from roomloop.realtime.events import NEW_NOTIFICATION, ROOM_INVITATION

logger = logging.getLogger(__name__)


def build_notification_payload(notification) -> Dict[str, Any]:
    return {
        "id": str(notification.id),
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "data": notification.data,
        "isRead": notification.is_read,
        "createdAt": notification.created_at.isoformat(),
    }


def build_invitation_payload(invitation) -> Dict[str, Any]:
    return {
        "id": str(invitation.id),
        "roomId": invitation.room_id,
        "roomName": invitation.room_name,
        "inviter": {"_id": invitation.inviter_id, "username": invitation.inviter_username},
        "status": invitation.status,
        "createdAt": invitation.created_at.isoformat(),
    }


async def _push(broadcaster: RoomBroadcaster, user_id: str, event: str, payload: Dict[str, Any]) -> int:
    # 레코드는 이미 저장됐으므로 전송 실패는 요청을 실패시키지 않음
    try:
        return await broadcaster.send_to_user(user_id, event, payload)
    except RelayError as e:
        logger.error(f"Error pushing {event} to user {user_id}: {e}")
        return 0


async def publish_notification_created(broadcaster: RoomBroadcaster, notification) -> int:
    """새 알림을 수신자의 모든 연결에 전송"""
    return await _push(
        broadcaster, notification.user_id, NEW_NOTIFICATION, build_notification_payload(notification)
    )


async def publish_room_invitation(broadcaster: RoomBroadcaster, invitation) -> int:
    """새 초대를 초대받은 사용자의 모든 연결에 전송"""
    return await _push(
        broadcaster, invitation.invitee_id, ROOM_INVITATION, build_invitation_payload(invitation)
    )
