"""
Room reaction service layer for MongoDB operations.
"""

from typing import List

from pymongo import DESCENDING

from roomloop.models.reactions import Reaction
from roomloop.realtime.auth import Identity


async def create_reaction(room_id: str, reactor: Identity, emoji: str) -> Reaction:
    """채팅방 반응 생성"""
    reaction = Reaction(
        room_id=room_id,
        user_id=reactor.id,
        username=reactor.username,
        emoji=emoji,
    )
    await reaction.insert()
    return reaction


async def get_room_reactions(room_id: str, limit: int = 50) -> List[Reaction]:
    """채팅방 최근 반응 목록 (최신순)"""
    return await Reaction.find(
        Reaction.room_id == room_id
    ).sort([("created_at", DESCENDING)]).limit(limit).to_list()
