"""
Invitation service layer for MongoDB operations.
"""

from typing import List, Optional

from beanie import PydanticObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING

from roomloop.models.invitations import Invitation, INVITATION_PENDING
from roomloop.models.rooms import Room
from roomloop.realtime.auth import Identity


async def create_invitation(room: Room, inviter: Identity, invitee_id: str) -> Invitation:
    """초대 생성"""
    invitation = Invitation(
        room_id=str(room.id),
        room_name=room.name,
        inviter_id=inviter.id,
        inviter_username=inviter.username,
        invitee_id=invitee_id,
    )
    await invitation.insert()
    return invitation


async def find_invitation_by_id(invitation_id: str) -> Optional[Invitation]:
    """초대 ID로 조회"""
    try:
        return await Invitation.get(PydanticObjectId(invitation_id))
    except (InvalidId, TypeError):
        return None


async def find_pending_invitation(room_id: str, invitee_id: str) -> Optional[Invitation]:
    """같은 채팅방에 대한 대기 중 초대 조회"""
    return await Invitation.find_one(
        Invitation.room_id == room_id,
        Invitation.invitee_id == invitee_id,
        Invitation.status == INVITATION_PENDING,
    )


async def has_accepted_or_pending_invitation(room_id: str, user_id: str) -> bool:
    """비공개 채팅방 입장 가능 여부 확인용"""
    invitation = await Invitation.find_one(
        Invitation.room_id == room_id,
        Invitation.invitee_id == user_id,
        {"status": {"$ne": "declined"}},
    )
    return invitation is not None


async def get_pending_invitations(user_id: str, limit: int = 50) -> List[Invitation]:
    """사용자가 받은 대기 중 초대 목록 (최신순)"""
    return await Invitation.find(
        Invitation.invitee_id == user_id,
        Invitation.status == INVITATION_PENDING,
    ).sort([("created_at", DESCENDING)]).limit(limit).to_list()


async def respond_to_invitation(invitation: Invitation, accepted: bool) -> Invitation:
    """초대 수락/거절"""
    invitation.respond(accepted)
    await invitation.save()
    return invitation
