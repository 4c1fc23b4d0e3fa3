"""
Socket.IO 이벤트 정의

수신 이벤트는 이벤트 이름으로 구분되는 pydantic 유니온으로 파싱하고,
송신 이벤트는 발신자 Identity를 붙인 payload로 만듭니다.
"""

from dataclasses import dataclass
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from roomloop.realtime.auth import Identity

# 수신 이벤트 이름 (client → server)
JOIN_ROOM = "joinRoom"
LEAVE_ROOM = "leaveRoom"
SEND_MESSAGE = "sendMessage"
SEND_REACTION = "sendReaction"
SEND_MESSAGE_REACTION = "sendMessageReaction"

INBOUND_EVENTS = (JOIN_ROOM, LEAVE_ROOM, SEND_MESSAGE, SEND_REACTION, SEND_MESSAGE_REACTION)

# 송신 이벤트 이름 (server → client)
NEW_MESSAGE = "newMessage"
NEW_REACTION = "newReaction"
NEW_MESSAGE_REACTION = "newMessageReaction"
NEW_NOTIFICATION = "newNotification"
ROOM_INVITATION = "roomInvitation"
ERROR = "error"


class InboundEvent(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    room_id: str = Field(..., alias="roomId", min_length=1)


class JoinRoom(InboundEvent):
    event: Literal["joinRoom"] = JOIN_ROOM


class LeaveRoom(InboundEvent):
    event: Literal["leaveRoom"] = LEAVE_ROOM


class SendMessage(InboundEvent):
    event: Literal["sendMessage"] = SEND_MESSAGE
    message: Any


class SendReaction(InboundEvent):
    event: Literal["sendReaction"] = SEND_REACTION
    reaction: Any


class SendMessageReaction(InboundEvent):
    event: Literal["sendMessageReaction"] = SEND_MESSAGE_REACTION
    message_id: str = Field(..., alias="messageId", min_length=1)
    reaction: Any
    removed: Optional[bool] = None
    updated: Optional[bool] = None

    def _flag(self, name: str) -> bool:
        # 최상위 플래그가 우선, 없으면 reaction 안의 플래그를 사용
        value = getattr(self, name)
        if value is not None:
            return value
        if isinstance(self.reaction, dict):
            return bool(self.reaction.get(name) or False)
        return False

    @property
    def is_removed(self) -> bool:
        return self._flag("removed")

    @property
    def is_updated(self) -> bool:
        return self._flag("updated")


ClientEvent = Annotated[
    Union[JoinRoom, LeaveRoom, SendMessage, SendReaction, SendMessageReaction],
    Field(discriminator="event"),
]

_client_event_adapter = TypeAdapter(ClientEvent)


def parse_client_event(name: str, data: Any) -> Union[JoinRoom, LeaveRoom, SendMessage, SendReaction, SendMessageReaction]:
    """
    이벤트 이름과 payload로 수신 이벤트를 파싱합니다.

    Raises:
        pydantic.ValidationError: 알 수 없는 이벤트이거나 payload 형식이 잘못된 경우
    """
    body = dict(data) if isinstance(data, dict) else {}
    body["event"] = name
    return _client_event_adapter.validate_python(body)


@dataclass(frozen=True)
class RoomEmit:
    """디스패치 결과로 만들어지는 송신 효과"""
    room_id: str
    event: str
    payload: Dict[str, Any]
    origin: Optional[str] = None
    failure_message: str = "Failed to relay event"


def new_message_payload(message: Any, sender: Identity) -> Dict[str, Any]:
    return {
        "message": message,
        "user": sender.to_user_payload(),
    }


def new_reaction_payload(reaction: Any, sender: Identity) -> Dict[str, Any]:
    return {
        "reaction": reaction,
        "user": sender.to_user_payload(),
    }


def new_message_reaction_payload(
    message_id: str,
    reaction: Any,
    sender: Identity,
    removed: bool = False,
    updated: bool = False,
) -> Dict[str, Any]:
    return {
        "messageId": message_id,
        "reaction": reaction,
        "user": sender.to_user_payload(),
        "removed": removed,
        "updated": updated,
    }


def error_payload(message: str) -> Dict[str, str]:
    return {"message": message}
