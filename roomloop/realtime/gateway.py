"""
Socket.IO 게이트웨이

핸드셰이크 인증 → 레지스트리 등록 → 수신 이벤트 디스패치 → 룸 브로드캐스트를
하나의 객체로 묶습니다. 애플리케이션 lifespan에서 생성/종료됩니다.

클라이언트 규약:
- Socket.IO path: /socket.io
- Auth: `auth.token` (또는 Authorization 헤더, `token` 쿼리 파라미터)
"""

import logging
from typing import Any, Dict, List, Optional

import socketio
from pydantic import ValidationError
from socketio.exceptions import ConnectionRefusedError as SocketConnectionRefused

from roomloop.core.logging import log_socket_event, log_authentication_event
from roomloop.realtime.auth import extract_handshake_token, verify_token
from roomloop.realtime.broadcaster import RoomBroadcaster
from roomloop.realtime.errors import AuthError, RelayError
from roomloop.realtime.events import INBOUND_EVENTS, ERROR, RoomEmit, error_payload, parse_client_event
from roomloop.realtime.handlers import dispatch
from roomloop.realtime.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class RealtimeGateway:
    """인증된 Socket.IO 연결의 릴레이 게이트웨이"""

    def __init__(
        self,
        allowed_origins: Optional[List[str]] = None,
        sio: Optional[socketio.AsyncServer] = None,
        registry: Optional[ConnectionRegistry] = None,
    ):
        self.sio = sio or socketio.AsyncServer(
            async_mode="asgi",
            cors_allowed_origins=allowed_origins if allowed_origins is not None else [],
            logger=False,
            engineio_logger=False,
        )
        self.registry = registry or ConnectionRegistry()
        self.broadcaster = RoomBroadcaster(self.registry, self.sio)

        self.sio.on("connect", self.connect)
        self.sio.on("disconnect", self.disconnect)
        for name in INBOUND_EVENTS:
            self.sio.on(name, self._event_handler(name))
        self.sio.on("*", self.unknown_event)

    def asgi_app(self, other_asgi_app) -> socketio.ASGIApp:
        """FastAPI 앱을 감싸는 ASGI 앱 (/socket.io 외의 요청은 FastAPI로 전달)"""
        return socketio.ASGIApp(self.sio, other_asgi_app=other_asgi_app, socketio_path="socket.io")

    async def connect(self, sid: str, environ: Dict[str, Any], auth: Any = None) -> None:
        """핸드셰이크 인증. 실패하면 레지스트리에 아무것도 남기지 않고 연결을 거부합니다."""
        token = extract_handshake_token(environ, auth)
        try:
            identity = verify_token(token)
        except AuthError as e:
            logger.warning(f"Socket authentication error: {e.kind.value} ({e.reason or 'no detail'})")
            log_authentication_event(logger, "socket_handshake", success=False, sid=sid, kind=e.kind.value)
            raise SocketConnectionRefused(e.message)

        self.registry.on_connect(sid, identity)
        log_socket_event(logger, "connected", sid, user_id=identity.id, username=identity.username)

    async def disconnect(self, sid: str, reason: Any = None) -> None:
        """비정상 종료를 포함한 모든 종료에서 한 번 호출됩니다."""
        identity = self.registry.on_disconnect(sid)
        log_socket_event(
            logger,
            "disconnected",
            sid,
            user_id=identity.id if identity else None,
            reason=str(reason) if reason is not None else None,
        )

    def _event_handler(self, name: str):
        # 클라이언트가 보낸 추가 인자는 무시
        async def handler(sid: str, data: Any = None, *args: Any) -> None:
            await self.handle_event(sid, name, data)
        handler.__name__ = f"on_{name}"
        return handler

    async def handle_event(self, sid: str, name: str, data: Any) -> None:
        """
        수신 이벤트 하나를 파싱, 디스패치하고 송신 효과를 적용합니다.

        python-socketio는 이벤트마다 백그라운드 태스크를 만들기 때문에
        여기서 빠져나간 예외는 프로세스 레벨 핸들러까지 올라갑니다.
        이벤트 단위 장애는 발신 연결에 error 이벤트로만 알립니다.
        """
        try:
            event = parse_client_event(name, data)
        except ValidationError as e:
            logger.warning(f"Invalid {name} payload from {sid}: {e.error_count()} error(s)")
            await self._emit_error(sid, f"Invalid {name} payload")
            return

        try:
            for effect in dispatch(self.registry, sid, event):
                await self.apply(sid, effect)
        except Exception as e:
            logger.error(f"Error handling {name} from {sid}: {type(e).__name__}: {e}", exc_info=True)
            await self._emit_error(sid, f"Failed to process {name}")

    async def apply(self, sid: str, effect: RoomEmit) -> int:
        """송신 효과 적용. 릴레이 실패는 재시도 없이 발신 연결에만 error 이벤트로 알립니다."""
        try:
            return await self.broadcaster.broadcast(
                effect.room_id, effect.event, effect.payload, origin=effect.origin
            )
        except RelayError as e:
            logger.error(f"Error relaying {effect.event}: {e}")
            await self._emit_error(sid, effect.failure_message)
            return 0

    async def unknown_event(self, event: str, sid: str, *args: Any) -> None:
        logger.warning(f"Unknown socket event '{event}' from {sid}")

    async def _emit_error(self, sid: str, message: str) -> None:
        try:
            await self.sio.emit(ERROR, error_payload(message), to=sid)
        except Exception as e:
            logger.error(f"Socket error for {sid}: could not report '{message}': {e}")

    def shutdown(self) -> None:
        """서버 종료 시 레지스트리가 보유한 모든 참조를 해제합니다."""
        logger.info(f"Releasing {len(self.registry)} socket connection(s)")
        self.registry.clear()
