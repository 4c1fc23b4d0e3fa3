"""실시간 계층 예외 정의"""

from enum import Enum
from typing import List, Optional


class AuthErrorKind(str, Enum):
    MISSING_TOKEN = "MissingToken"
    INVALID_TOKEN = "InvalidToken"


# 클라이언트가 패턴 매칭하는 고정 문자열
AUTH_ERROR_MESSAGES = {
    AuthErrorKind.MISSING_TOKEN: "Authentication error: Token not provided",
    AuthErrorKind.INVALID_TOKEN: "Authentication error: Invalid token",
}


class AuthError(Exception):
    """자격 증명 검증 실패. 연결/요청을 즉시 종료시키며 재시도하지 않는다."""

    def __init__(self, kind: AuthErrorKind, reason: Optional[str] = None):
        self.kind = kind
        self.reason = reason
        super().__init__(AUTH_ERROR_MESSAGES[kind])

    @property
    def message(self) -> str:
        return AUTH_ERROR_MESSAGES[self.kind]


class RelayError(Exception):
    """채널로 이벤트를 전송하는 중 실패. 발신 연결에만 보고되며 연결은 유지된다."""

    def __init__(self, room_id: str, event: str, failed_sids: List[str]):
        self.room_id = room_id
        self.event = event
        self.failed_sids = failed_sids
        super().__init__(
            f"Failed to relay {event} to {len(failed_sids)} connection(s) in room {room_id}"
        )
