from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import parse_qs
import logging

from roomloop.realtime.errors import AuthError, AuthErrorKind
from roomloop.utils.auth import decode_access_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """검증된 토큰에서 한 번 추출되는 사용자 식별 정보 (연결 수명 동안 불변)"""
    id: str
    username: str

    def to_user_payload(self) -> Dict[str, str]:
        """브로드캐스트 이벤트에 첨부되는 발신자 정보"""
        return {"_id": self.id, "username": self.username}


def verify_token(token: Optional[str]) -> Identity:
    """
    Bearer 토큰을 검증하고 Identity를 반환합니다.

    Socket.IO 핸드셰이크와 REST 의존성 모두 이 함수를 사용하므로
    두 경로가 같은 서명 키와 토큰 형식을 신뢰합니다.

    Args:
        token: JWT 액세스 토큰 ("Bearer " 접두사 허용)

    Returns:
        Identity: 인증된 사용자 정보

    Raises:
        AuthError: 토큰이 없으면 MissingToken, 검증 실패 시 InvalidToken
    """
    if token is not None and token.startswith("Bearer "):
        token = token[len("Bearer "):]
    if token is not None:
        token = token.strip()

    if not token:
        raise AuthError(AuthErrorKind.MISSING_TOKEN)

    payload = decode_access_token(token)
    if not payload:
        raise AuthError(AuthErrorKind.INVALID_TOKEN, "signature, expiry or token type check failed")

    user_id = payload.get("sub") or payload.get("id")
    username = payload.get("username")
    if not user_id or not username:
        raise AuthError(AuthErrorKind.INVALID_TOKEN, "token is missing identity claims")

    return Identity(id=str(user_id), username=str(username))


def extract_handshake_token(environ: Dict[str, Any], auth: Any = None) -> Optional[str]:
    """
    Socket.IO 핸드셰이크에서 토큰을 추출합니다.

    우선순위: auth.token → Authorization 헤더 → token 쿼리 파라미터
    """
    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    environ = environ or {}

    header = environ.get("HTTP_AUTHORIZATION")
    if isinstance(header, str) and header.startswith("Bearer "):
        return header

    query_string = environ.get("QUERY_STRING", "")
    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")
    query_token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(query_token, str) and query_token:
        return query_token

    return None
