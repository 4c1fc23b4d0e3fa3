from fastapi import APIRouter, Depends, Query, status

from roomloop.api.dependencies import get_current_user, get_participant_room
from roomloop.core.errors import not_a_participant_error, room_not_found_error
from roomloop.core.validators import Validator
from roomloop.models.rooms import Room
from roomloop.realtime.auth import Identity
from roomloop.schemas.message import MessageCreate, MessageResponse, MessageList
from roomloop.services import message_service, room_service

router = APIRouter(prefix="/api/messages", tags=["Messages"])


@router.get("/room/{room_id}", response_model=MessageList)
async def get_room_messages(
    room_id: str,
    limit: int = Query(50, ge=1, le=100, description="조회 개수"),
    skip: int = Query(0, ge=0, description="건너뛸 개수"),
    room: Room = Depends(get_participant_room)
) -> MessageList:
    """
    채팅방 메시지 조회 (참여자만)

    최신 메시지부터 limit개를 가져와 오래된 순으로 반환합니다.
    """
    messages = await message_service.get_room_messages(room_id, limit=limit, skip=skip)
    total = await message_service.get_room_messages_count(room_id)

    return MessageList(
        messages=[MessageResponse.model_validate(message) for message in messages],
        total=total,
        limit=limit,
        skip=skip,
        has_next=skip + len(messages) < total,
    )


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_data: MessageCreate,
    current_user: Identity = Depends(get_current_user)
) -> MessageResponse:
    """
    메시지 저장

    저장된 메시지는 클라이언트가 Socket.IO `sendMessage`로 채팅방에 릴레이합니다.
    """
    text = Validator.validate_message_text(message_data.text)

    room = await room_service.find_room_by_id(message_data.room_id)
    if not room:
        raise room_not_found_error(message_data.room_id)
    if not room.is_participant(current_user.id):
        raise not_a_participant_error()

    message = await message_service.create_message(message_data.room_id, current_user, text)
    return MessageResponse.model_validate(message)
