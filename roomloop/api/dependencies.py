"""
API 공통 의존성

REST 인증은 Socket.IO 핸드셰이크와 같은 verify_token()을 사용합니다.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from roomloop.core.errors import AuthenticationException, room_not_found_error, not_a_participant_error
from roomloop.core.logging import log_security_event, user_id_var
from roomloop.models.rooms import Room
from roomloop.realtime.auth import Identity, verify_token
from roomloop.realtime.broadcaster import RoomBroadcaster
from roomloop.realtime.errors import AuthError
from roomloop.realtime.registry import ConnectionRegistry
from roomloop.services import room_service

logger = logging.getLogger(__name__)

# OAuth2 설정 (토큰이 없어도 직접 MissingToken으로 처리)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme)
) -> Identity:
    """
    현재 인증된 사용자 조회

    토큰의 Identity를 그대로 신뢰하며 DB 조회는 하지 않습니다.
    """
    try:
        identity = verify_token(token)
    except AuthError as e:
        raise AuthenticationException(e.message, details={"kind": e.kind.value})

    user_id_var.set(identity.id)
    request.state.user_id = identity.id
    return identity


def get_broadcaster(request: Request) -> RoomBroadcaster:
    return request.app.state.gateway.broadcaster


def get_registry(request: Request) -> ConnectionRegistry:
    return request.app.state.gateway.registry


async def get_room_or_404(room_id: str) -> Room:
    room = await room_service.find_room_by_id(room_id)
    if not room:
        raise room_not_found_error(room_id)
    return room


async def get_participant_room(
    room_id: str,
    current_user: Identity = Depends(get_current_user)
) -> Room:
    """참여자만 접근 가능한 채팅방 조회"""
    room = await get_room_or_404(room_id)
    if not room.is_participant(current_user.id):
        log_security_event(logger, "room_access_denied", severity="low", user_id=current_user.id, room_id=room_id)
        raise not_a_participant_error()
    return room
