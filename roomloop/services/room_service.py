"""
Room service layer for MongoDB operations.

Handles room scheduling, participant management and visibility rules.
"""

from datetime import datetime
from typing import List, Optional

from beanie import PydanticObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING

from roomloop.models.invitations import Invitation
from roomloop.models.messages import Message
from roomloop.models.reactions import Reaction
from roomloop.models.rooms import Room
from roomloop.realtime.auth import Identity
from roomloop.schemas.room import RoomCreate
from roomloop.utils.time_utils import (
    ROOM_STATUS_SCHEDULED,
    ROOM_STATUS_LIVE,
    ROOM_STATUS_ENDED,
    utcnow,
)


async def create_room(host: Identity, room_data: RoomCreate) -> Room:
    """채팅방 생성 (호스트는 자동으로 참여자)"""
    room = Room(
        name=room_data.name.strip(),
        description=room_data.description,
        host_id=host.id,
        host_username=host.username,
        starts_at=room_data.starts_at,
        ends_at=room_data.ends_at,
        is_private=room_data.is_private,
        max_participants=room_data.max_participants,
        participants=[host.id],
        tags=room_data.tags,
    )
    await room.insert()
    return room


async def find_room_by_id(room_id: str) -> Optional[Room]:
    """채팅방 ID로 조회"""
    try:
        return await Room.get(PydanticObjectId(room_id))
    except (InvalidId, TypeError):
        return None


def _status_condition(status: str, now: datetime) -> dict:
    if status == ROOM_STATUS_SCHEDULED:
        return {"starts_at": {"$gt": now}}
    if status == ROOM_STATUS_LIVE:
        return {"starts_at": {"$lte": now}, "ends_at": {"$gt": now}}
    if status == ROOM_STATUS_ENDED:
        return {"ends_at": {"$lte": now}}
    raise ValueError(f"Unknown room status: {status}")


async def get_visible_rooms(
    user_id: str,
    status: Optional[str] = None,
    limit: int = 50,
    skip: int = 0
) -> List[Room]:
    """공개 채팅방과 사용자가 참여 중인 비공개 채팅방 목록 (시작 시각 순)"""
    conditions = {
        "$or": [
            {"is_private": False},
            {"participants": user_id},
        ]
    }
    if status:
        conditions.update(_status_condition(status, utcnow()))

    return await Room.find(conditions).sort([("starts_at", ASCENDING)]).skip(skip).limit(limit).to_list()


def can_view_room(room: Room, user_id: str) -> bool:
    return not room.is_private or room.is_participant(user_id)


async def add_participant(room: Room, user_id: str) -> Room:
    """참여자 추가 (이미 참여 중이면 그대로 반환)"""
    if room.is_participant(user_id):
        return room
    room.participants.append(user_id)
    room.updated_at = utcnow()
    await room.save()
    return room


async def remove_participant(room: Room, user_id: str) -> Room:
    """참여자 제거 (참여 중이 아니면 그대로 반환)"""
    if not room.is_participant(user_id):
        return room
    room.participants = [pid for pid in room.participants if pid != user_id]
    room.updated_at = utcnow()
    await room.save()
    return room


async def delete_room(room: Room) -> None:
    """채팅방과 관련 메시지/반응/초대를 함께 삭제"""
    room_id = str(room.id)
    await Message.find(Message.room_id == room_id).delete()
    await Reaction.find(Reaction.room_id == room_id).delete()
    await Invitation.find(Invitation.room_id == room_id).delete()
    await room.delete()
