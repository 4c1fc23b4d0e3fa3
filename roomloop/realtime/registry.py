from typing import Dict, FrozenSet, List, Optional, Set
import logging

from roomloop.realtime.auth import Identity

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """
    살아있는 연결(sid)과 인증된 Identity, 참여 중인 룸 채널을 관리합니다.

    모든 변경 메서드는 동기 함수이고 중간에 await 지점이 없으므로
    하나의 이벤트 루프 안에서는 별도의 락 없이 직렬화됩니다.
    스레드 풀에서 호출하려면 이 객체를 하나의 디스패처에 가둬야 합니다.
    """

    def __init__(self):
        # 연결별 사용자 정보: {sid: Identity}
        self.connection_info: Dict[str, Identity] = {}
        # 룸 채널별 연결 집합: {room_id: {sid, ...}}
        self.room_connections: Dict[str, Set[str]] = {}
        # 연결별 참여 룸 집합: {sid: {room_id, ...}}
        self.connection_rooms: Dict[str, Set[str]] = {}

    def on_connect(self, sid: str, identity: Identity) -> None:
        """인증된 연결을 등록하고 개인 알림 채널(identity.id)에 자동 참여시킵니다."""
        if sid in self.connection_info:
            raise ValueError(f"Connection {sid} is already registered")

        self.connection_info[sid] = identity
        self.connection_rooms[sid] = set()
        self.join(sid, identity.id)

        logger.info(f"User {identity.username} joined personal notification room: {identity.id}")

    def join(self, sid: str, room_id: str) -> None:
        """룸 채널에 연결을 추가합니다. 이미 참여 중이면 아무 일도 하지 않습니다."""
        if sid not in self.connection_info:
            raise KeyError(f"Connection {sid} is not registered")

        self.room_connections.setdefault(room_id, set()).add(sid)
        self.connection_rooms[sid].add(room_id)

    def leave(self, sid: str, room_id: str) -> None:
        """룸 채널에서 연결을 제거합니다. 참여 중이 아니면 아무 일도 하지 않습니다."""
        rooms = self.connection_rooms.get(sid)
        if rooms is not None:
            rooms.discard(room_id)
        self._discard_member(room_id, sid)

    def on_disconnect(self, sid: str) -> Optional[Identity]:
        """
        연결을 모든 룸 채널(개인 알림 채널 포함)에서 제거하고 참조를 해제합니다.

        Returns:
            Identity: 해제된 연결의 사용자 정보, 등록되지 않은 연결이면 None
        """
        identity = self.connection_info.pop(sid, None)
        rooms = self.connection_rooms.pop(sid, set())
        for room_id in rooms:
            self._discard_member(room_id, sid)
        return identity

    def _discard_member(self, room_id: str, sid: str) -> None:
        members = self.room_connections.get(room_id)
        if members is None:
            return
        members.discard(sid)
        # 채널에 연결이 없으면 채널 자체를 제거
        if not members:
            del self.room_connections[room_id]

    def identity_of(self, sid: str) -> Optional[Identity]:
        return self.connection_info.get(sid)

    def members(self, room_id: str) -> FrozenSet[str]:
        """룸 채널의 현재 연결 스냅샷"""
        return frozenset(self.room_connections.get(room_id, ()))

    def rooms_of(self, sid: str) -> FrozenSet[str]:
        return frozenset(self.connection_rooms.get(sid, ()))

    def is_member(self, sid: str, room_id: str) -> bool:
        return sid in self.room_connections.get(room_id, ())

    def get_room_users(self, room_id: str) -> List[str]:
        """룸 채널에 연결된 사용자 ID 목록 (중복 제거, 정렬)"""
        return sorted({
            self.connection_info[sid].id
            for sid in self.room_connections.get(room_id, ())
            if sid in self.connection_info
        })

    def get_user_count_in_room(self, room_id: str) -> int:
        return len(self.get_room_users(room_id))

    def is_user_connected(self, user_id: str) -> bool:
        return any(identity.id == user_id for identity in self.connection_info.values())

    def get_online_users(self) -> List[str]:
        return sorted({identity.id for identity in self.connection_info.values()})

    def clear(self) -> None:
        """서버 종료 시 모든 상태를 해제합니다."""
        self.connection_info.clear()
        self.room_connections.clear()
        self.connection_rooms.clear()

    def __len__(self) -> int:
        return len(self.connection_info)
