import logging
from typing import List

from roomloop.realtime.events import (
    JoinRoom,
    LeaveRoom,
    SendMessage,
    SendReaction,
    SendMessageReaction,
    RoomEmit,
    NEW_MESSAGE,
    NEW_REACTION,
    NEW_MESSAGE_REACTION,
    new_message_payload,
    new_reaction_payload,
    new_message_reaction_payload,
)
from roomloop.realtime.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


def dispatch(registry: ConnectionRegistry, sid: str, event) -> List[RoomEmit]:
    """
    수신 이벤트 하나를 처리합니다.

    멤버십 변경(joinRoom/leaveRoom)은 registry에 바로 반영하고,
    릴레이 이벤트는 송신 효과(RoomEmit) 목록으로 돌려줍니다.
    저장은 REST 호출에서 이미 끝났으므로 payload는 검증이나 저장 없이 그대로 전달합니다.

    Args:
        registry: 연결 레지스트리
        sid: 이벤트를 보낸 연결
        event: parse_client_event()로 파싱된 수신 이벤트

    Returns:
        List[RoomEmit]: 적용할 송신 효과
    """
    identity = registry.identity_of(sid)
    if identity is None:
        logger.error(f"Event {event.event} received from unregistered connection {sid}")
        return []

    if isinstance(event, JoinRoom):
        registry.join(sid, event.room_id)
        logger.info(f"User {identity.username} joined room: {event.room_id}")
        return []

    if isinstance(event, LeaveRoom):
        registry.leave(sid, event.room_id)
        logger.info(f"User {identity.username} left room: {event.room_id}")
        return []

    if isinstance(event, SendMessage):
        return [RoomEmit(
            room_id=event.room_id,
            event=NEW_MESSAGE,
            payload=new_message_payload(event.message, identity),
            origin=sid,
            failure_message="Failed to send message",
        )]

    if isinstance(event, SendReaction):
        return [RoomEmit(
            room_id=event.room_id,
            event=NEW_REACTION,
            payload=new_reaction_payload(event.reaction, identity),
            origin=sid,
            failure_message="Failed to send reaction",
        )]

    if isinstance(event, SendMessageReaction):
        # 같은 사용자의 연속 반응도 중복 제거 없이 그대로 전달 (removed/updated 플래그로 구분)
        return [RoomEmit(
            room_id=event.room_id,
            event=NEW_MESSAGE_REACTION,
            payload=new_message_reaction_payload(
                event.message_id,
                event.reaction,
                identity,
                removed=event.is_removed,
                updated=event.is_updated,
            ),
            origin=sid,
            failure_message="Failed to send message reaction",
        )]

    logger.warning(f"Unknown event type: {type(event).__name__} from {sid}")
    return []
