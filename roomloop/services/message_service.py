"""
Message service layer for MongoDB operations.

Handles chat message persistence and per-user message reactions.
"""

from typing import List, Optional, Tuple

from beanie import PydanticObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING

from roomloop.models.messages import Message, MessageReactionEntry
from roomloop.realtime.auth import Identity
from roomloop.utils.time_utils import utcnow


# =============================================================================
# Message CRUD Operations
# =============================================================================

async def create_message(room_id: str, sender: Identity, text: str) -> Message:
    """메시지 생성"""
    now = utcnow()
    message = Message(
        room_id=room_id,
        user_id=sender.id,
        username=sender.username,
        text=text,
        created_at=now,
        updated_at=now,
    )
    await message.insert()
    return message


async def find_message_by_id(message_id: str) -> Optional[Message]:
    """메시지 ID로 조회"""
    try:
        return await Message.get(PydanticObjectId(message_id))
    except (InvalidId, TypeError):
        return None


async def get_room_messages(room_id: str, limit: int = 50, skip: int = 0) -> List[Message]:
    """채팅방 메시지 목록 조회"""
    messages = await Message.find(
        Message.room_id == room_id
    ).sort([("created_at", DESCENDING)]).skip(skip).limit(limit).to_list()

    # 최신순으로 정렬된 것을 역순으로 변경 (오래된 것부터)
    return list(reversed(messages))


async def get_room_messages_count(room_id: str) -> int:
    """채팅방 메시지 총 개수 조회"""
    return await Message.find(Message.room_id == room_id).count()


# =============================================================================
# Message Reactions
# =============================================================================

def apply_reaction_toggle(
    message: Message,
    reactor: Identity,
    emoji: str
) -> Tuple[MessageReactionEntry, bool, bool]:
    """
    사용자별 메시지 반응 토글 (문서만 변경, 저장하지 않음)

    - 반응이 없으면 추가
    - 같은 이모지를 다시 누르면 제거 (removed=True)
    - 다른 이모지를 누르면 교체 (updated=True)

    Returns:
        (반응, removed, updated)
    """
    existing = message.find_reaction(reactor.id)

    if existing and existing.emoji == emoji:
        message.reactions = [entry for entry in message.reactions if entry.user_id != reactor.id]
        return existing, True, False

    if existing:
        existing.emoji = emoji
        existing.created_at = utcnow()
        return existing, False, True

    entry = MessageReactionEntry(user_id=reactor.id, username=reactor.username, emoji=emoji)
    message.reactions.append(entry)
    return entry, False, False


async def toggle_message_reaction(
    message: Message,
    reactor: Identity,
    emoji: str
) -> Tuple[MessageReactionEntry, bool, bool]:
    """메시지 반응 토글 후 저장"""
    result = apply_reaction_toggle(message, reactor, emoji)
    message.updated_at = utcnow()
    await message.save()
    return result
