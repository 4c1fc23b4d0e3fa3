from typing import Any, Dict, Optional, Protocol
import logging

from roomloop.realtime.errors import RelayError
from roomloop.realtime.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """연결 단위 전송 계층 (socketio.AsyncServer와 호환)"""

    async def emit(self, event: str, data: Any = None, to: Optional[str] = None, **kwargs) -> None:
        ...


class RoomBroadcaster:
    """
    룸 채널의 다른 모든 연결에 이벤트를 전달합니다.

    - 발신 연결(origin)에는 에코하지 않습니다.
    - 확인 응답, 재시도, 버퍼링은 하지 않습니다. 참여 중이 아닌 사용자는 받지 못합니다.
    - 연결별 전송 순서는 전송 계층의 순서 보장을 그대로 따릅니다.
    """

    def __init__(self, registry: ConnectionRegistry, transport: Transport):
        self.registry = registry
        self.transport = transport

    async def broadcast(
        self,
        room_id: str,
        event: str,
        payload: Dict[str, Any],
        origin: Optional[str] = None,
    ) -> int:
        """
        룸 채널에 이벤트를 브로드캐스트합니다.

        Args:
            room_id: 룸 채널 키 (개인 알림 채널이면 사용자 ID)
            event: 송신 이벤트 이름
            payload: 이벤트 데이터
            origin: 제외할 발신 연결 sid

        Returns:
            int: 실제로 전송한 연결 수 (수신자가 없으면 0)

        Raises:
            RelayError: 하나 이상의 연결로 전송하지 못한 경우 (나머지 연결에는 전송 완료)
        """
        # 첫 await 전에 멤버 스냅샷
        recipients = sorted(sid for sid in self.registry.members(room_id) if sid != origin)
        if not recipients:
            return 0

        delivered = 0
        failed_sids = []

        for sid in recipients:
            # 전송 도중 끊어진 연결은 건너뜀
            if self.registry.identity_of(sid) is None:
                continue
            try:
                await self.transport.emit(event, payload, to=sid)
                delivered += 1
            except Exception as e:
                logger.error(f"Failed to emit {event} to {sid} in room {room_id}: {e}")
                failed_sids.append(sid)

        if failed_sids:
            raise RelayError(room_id, event, failed_sids)

        return delivered

    async def send_to_user(self, user_id: str, event: str, payload: Dict[str, Any]) -> int:
        """개인 알림 채널을 통해 특정 사용자의 모든 연결에 전송합니다."""
        return await self.broadcast(user_id, event, payload)
