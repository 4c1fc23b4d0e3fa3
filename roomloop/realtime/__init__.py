"""
Socket.IO 실시간 릴레이 모듈

REST API로 이미 저장된 이벤트를 같은 룸 채널의 다른 연결에 전달합니다.

주요 구성 요소:
- auth: 토큰 검증 (핸드셰이크와 REST 공용)
- registry: 연결 ↔ Identity ↔ 룸 채널 관리
- broadcaster: 룸 채널 브로드캐스트
- handlers: 수신 이벤트 디스패치
- gateway: python-socketio 서버 연결
"""

from .auth import Identity, verify_token
from .broadcaster import RoomBroadcaster
from .errors import AuthError, AuthErrorKind, RelayError
from .gateway import RealtimeGateway
from .registry import ConnectionRegistry

__all__ = [
    "Identity",
    "verify_token",
    "RoomBroadcaster",
    "AuthError",
    "AuthErrorKind",
    "RelayError",
    "RealtimeGateway",
    "ConnectionRegistry",
]
