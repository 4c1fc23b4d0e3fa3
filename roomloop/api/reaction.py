from typing import List

from fastapi import APIRouter, Depends, Query, status

from roomloop.api.dependencies import get_current_user, get_participant_room
from roomloop.core.errors import ResourceNotFoundException, not_a_participant_error, room_not_found_error
from roomloop.core.validators import Validator
from roomloop.models.rooms import Room
from roomloop.realtime.auth import Identity
from roomloop.schemas.message import MessageReactionResponse
from roomloop.schemas.reaction import (
    ReactionCreate,
    ReactionResponse,
    MessageReactionToggle,
    MessageReactionResult,
)
from roomloop.services import message_service, reaction_service, room_service

router = APIRouter(prefix="/api/reactions", tags=["Reactions"])


async def _require_participant(room_id: str, current_user: Identity) -> Room:
    room = await room_service.find_room_by_id(room_id)
    if not room:
        raise room_not_found_error(room_id)
    if not room.is_participant(current_user.id):
        raise not_a_participant_error()
    return room


@router.post("", response_model=ReactionResponse, status_code=status.HTTP_201_CREATED)
async def send_reaction(
    reaction_data: ReactionCreate,
    current_user: Identity = Depends(get_current_user)
) -> ReactionResponse:
    """채팅방 반응 저장 (클라이언트가 `sendReaction`으로 릴레이)"""
    emoji = Validator.validate_emoji(reaction_data.emoji)
    await _require_participant(reaction_data.room_id, current_user)

    reaction = await reaction_service.create_reaction(reaction_data.room_id, current_user, emoji)
    return ReactionResponse.model_validate(reaction)


@router.get("/room/{room_id}", response_model=List[ReactionResponse])
async def get_room_reactions(
    room_id: str,
    limit: int = Query(50, ge=1, le=100),
    room: Room = Depends(get_participant_room)
) -> List[ReactionResponse]:
    """채팅방 최근 반응 목록"""
    reactions = await reaction_service.get_room_reactions(room_id, limit=limit)
    return [ReactionResponse.model_validate(reaction) for reaction in reactions]


@router.post("/message/{message_id}", response_model=MessageReactionResult)
async def toggle_message_reaction(
    message_id: str,
    toggle: MessageReactionToggle,
    current_user: Identity = Depends(get_current_user)
) -> MessageReactionResult:
    """
    메시지 반응 토글

    사용자당 메시지 하나에 반응 하나:
    - 같은 이모지 → 제거 (`removed`)
    - 다른 이모지 → 교체 (`updated`)

    결과는 `sendMessageReaction` 릴레이 payload로 그대로 사용합니다.
    """
    emoji = Validator.validate_emoji(toggle.emoji)

    message = await message_service.find_message_by_id(message_id)
    if not message:
        raise ResourceNotFoundException("Message")
    await _require_participant(message.room_id, current_user)

    entry, removed, updated = await message_service.toggle_message_reaction(message, current_user, emoji)

    return MessageReactionResult(
        message_id=message_id,
        reaction=MessageReactionResponse.model_validate(entry),
        removed=removed,
        updated=updated,
    )
