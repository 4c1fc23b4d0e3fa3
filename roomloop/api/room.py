from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from roomloop.api.dependencies import get_current_user, get_registry, get_room_or_404
from roomloop.core.errors import (
    AuthorizationException,
    BusinessLogicException,
    room_not_found_error,
    not_a_participant_error,
)
from roomloop.core.validators import Validator
from roomloop.realtime.auth import Identity
from roomloop.realtime.registry import ConnectionRegistry
from roomloop.schemas.room import RoomCreate, RoomResponse, RoomPresence
from roomloop.services import room_service, invitation_service
from roomloop.utils.time_utils import ROOM_STATUS_ENDED, ROOM_STATUS_LIVE, ROOM_STATUS_SCHEDULED

router = APIRouter(prefix="/api/rooms", tags=["Rooms"])


def room_to_response(room) -> RoomResponse:
    return RoomResponse(
        id=str(room.id),
        name=room.name,
        description=room.description,
        host_id=room.host_id,
        host_username=room.host_username,
        starts_at=room.starts_at,
        ends_at=room.ends_at,
        is_private=room.is_private,
        max_participants=room.max_participants,
        participants=list(room.participants),
        participant_count=len(room.participants),
        tags=list(room.tags),
        status=room.status,
        created_at=room.created_at,
    )


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room(
    room_data: RoomCreate,
    current_user: Identity = Depends(get_current_user)
) -> RoomResponse:
    """
    채팅방(마이크로 밋업) 생성

    - **starts_at / ends_at**: 일정 (최대 12시간, 종료 시각은 미래)
    - **is_private**: 초대받은 사용자만 입장 가능
    """
    Validator.validate_room_schedule(room_data.starts_at, room_data.ends_at)

    room = await room_service.create_room(current_user, room_data)
    return room_to_response(room)


@router.get("", response_model=List[RoomResponse])
async def get_rooms(
    status_filter: Optional[str] = Query(
        None,
        alias="status",
        pattern=f"^({ROOM_STATUS_SCHEDULED}|{ROOM_STATUS_LIVE}|{ROOM_STATUS_ENDED})$"
    ),
    limit: int = Query(50, ge=1, le=100),
    skip: int = Query(0, ge=0),
    current_user: Identity = Depends(get_current_user)
) -> List[RoomResponse]:
    """공개 채팅방과 내가 참여 중인 채팅방 목록"""
    rooms = await room_service.get_visible_rooms(
        current_user.id, status=status_filter, limit=limit, skip=skip
    )
    return [room_to_response(room) for room in rooms]


@router.get("/{room_id}", response_model=RoomResponse)
async def get_room(
    room_id: str,
    current_user: Identity = Depends(get_current_user)
) -> RoomResponse:
    """채팅방 상세 조회 (비공개 채팅방은 참여자만)"""
    room = await get_room_or_404(room_id)
    if not room_service.can_view_room(room, current_user.id):
        # 비공개 채팅방의 존재 자체를 노출하지 않음
        raise room_not_found_error(room_id)
    return room_to_response(room)


@router.post("/{room_id}/join", response_model=RoomResponse)
async def join_room(
    room_id: str,
    current_user: Identity = Depends(get_current_user)
) -> RoomResponse:
    """
    채팅방 참여

    Socket.IO `joinRoom` 전에 호출해 참여 권한을 확정합니다.
    """
    room = await get_room_or_404(room_id)

    if room.is_participant(current_user.id):
        return room_to_response(room)

    if room.status == ROOM_STATUS_ENDED:
        raise BusinessLogicException("This room has already ended")

    if room.is_private and not await invitation_service.has_accepted_or_pending_invitation(
        room_id, current_user.id
    ):
        raise AuthorizationException("This room is invitation only")

    if room.is_full():
        raise BusinessLogicException("This room is full")

    room = await room_service.add_participant(room, current_user.id)
    return room_to_response(room)


@router.post("/{room_id}/leave", response_model=RoomResponse)
async def leave_room(
    room_id: str,
    current_user: Identity = Depends(get_current_user)
) -> RoomResponse:
    """채팅방 나가기 (호스트는 나갈 수 없음)"""
    room = await get_room_or_404(room_id)

    if room.host_id == current_user.id:
        raise BusinessLogicException("The host cannot leave the room")

    room = await room_service.remove_participant(room, current_user.id)
    return room_to_response(room)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room(
    room_id: str,
    current_user: Identity = Depends(get_current_user)
) -> Response:
    """채팅방 삭제 (호스트만)"""
    room = await get_room_or_404(room_id)

    if room.host_id != current_user.id:
        raise AuthorizationException("Only the host can delete this room")

    await room_service.delete_room(room)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{room_id}/presence", response_model=RoomPresence)
async def get_room_presence(
    room_id: str,
    current_user: Identity = Depends(get_current_user),
    registry: ConnectionRegistry = Depends(get_registry)
) -> RoomPresence:
    """
    채팅방의 실시간 접속 현황

    DB가 아닌 연결 레지스트리 기준입니다 (현재 룸 채널에 참여 중인 연결).
    """
    room = await get_room_or_404(room_id)
    if not room.is_participant(current_user.id):
        raise not_a_participant_error()

    online_users = registry.get_room_users(room_id)
    return RoomPresence(
        room_id=room_id,
        online_users=online_users,
        online_count=len(online_users),
        is_active=len(online_users) > 0,
    )
