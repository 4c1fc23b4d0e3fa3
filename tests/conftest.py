import os
import tempfile

# roomloop.core.config는 import 시점에 Settings()를 만들므로 먼저 환경 변수 설정
os.environ.setdefault("SECRET_KEY", "roomloop-test-secret")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "roomloop-test-logs"))

from datetime import datetime, timedelta
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from roomloop.main import app
from roomloop.models.messages import MessageReactionEntry
from roomloop.realtime.auth import Identity
from roomloop.realtime.broadcaster import RoomBroadcaster
from roomloop.realtime.registry import ConnectionRegistry
from roomloop.utils.auth import create_access_token
from roomloop.utils.time_utils import room_status

# 12바이트 hex (ObjectId 형식)
USER_A_ID = "64b000000000000000000001"
USER_B_ID = "64b000000000000000000002"
USER_C_ID = "64b000000000000000000003"
ROOM_ID = "64c000000000000000000001"


def make_token(user_id: str, username: str, **claims) -> str:
    return create_access_token(data={"sub": user_id, "username": username, **claims})


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# 사용자
# =============================================================================

@pytest.fixture
def identity_a() -> Identity:
    return Identity(id=USER_A_ID, username="alice")


@pytest.fixture
def identity_b() -> Identity:
    return Identity(id=USER_B_ID, username="bob")


@pytest.fixture
def token_a(identity_a) -> str:
    return make_token(identity_a.id, identity_a.username)


@pytest.fixture
def token_b(identity_b) -> str:
    return make_token(identity_b.id, identity_b.username)


# =============================================================================
# 실시간 계층
# =============================================================================

class FakeTransport:
    """socketio.AsyncServer.emit 대역 (전송 기록, 특정 sid 실패 주입)"""

    def __init__(self, fail_for=None):
        self.emitted = []
        self.fail_for = set(fail_for or ())

    async def emit(self, event, data=None, to=None, **kwargs):
        if to in self.fail_for:
            raise ConnectionResetError(f"transport closed for {to}")
        self.emitted.append((event, data, to))

    def events_for(self, sid):
        return [(event, data) for event, data, to in self.emitted if to == sid]


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def broadcaster(registry, transport) -> RoomBroadcaster:
    return RoomBroadcaster(registry, transport)


# =============================================================================
# HTTP 클라이언트
# =============================================================================

@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """테스트용 비동기 HTTP 클라이언트"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.state.gateway.registry.clear()
    app.dependency_overrides.clear()


# =============================================================================
# Mock 문서 (beanie 초기화 없이 라우터가 읽는 속성만 제공)
# =============================================================================

class MockUser:
    def __init__(self, user_id=USER_A_ID, username="alice", email="alice@example.com", display_name=None):
        self.id = user_id
        self.username = username
        self.email = email
        self.password_hash = "$2b$12$hash"
        self.display_name = display_name
        self.created_at = datetime.utcnow()
        self.updated_at = self.created_at


class MockRoom:
    def __init__(
        self,
        room_id=ROOM_ID,
        host: Optional[Identity] = None,
        participants=None,
        is_private=False,
        max_participants=None,
        starts_at=None,
        ends_at=None,
        name="Friday Python meetup",
    ):
        host = host or Identity(id=USER_A_ID, username="alice")
        now = datetime.utcnow()
        self.id = room_id
        self.name = name
        self.description = None
        self.host_id = host.id
        self.host_username = host.username
        self.starts_at = starts_at or now - timedelta(minutes=10)
        self.ends_at = ends_at or now + timedelta(hours=1)
        self.is_private = is_private
        self.max_participants = max_participants
        self.participants = list(participants) if participants is not None else [host.id]
        self.tags = []
        self.created_at = now

    @property
    def status(self) -> str:
        return room_status(self.starts_at, self.ends_at)

    def is_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def is_full(self) -> bool:
        return self.max_participants is not None and len(self.participants) >= self.max_participants


class MockMessage:
    def __init__(self, message_id="64d000000000000000000001", room_id=ROOM_ID,
                 sender: Optional[Identity] = None, text="hello", reactions=None):
        sender = sender or Identity(id=USER_A_ID, username="alice")
        self.id = message_id
        self.room_id = room_id
        self.user_id = sender.id
        self.username = sender.username
        self.text = text
        self.reactions = list(reactions or [])
        self.created_at = datetime.utcnow()
        self.updated_at = self.created_at

    def find_reaction(self, user_id: str) -> Optional[MessageReactionEntry]:
        for entry in self.reactions:
            if entry.user_id == user_id:
                return entry
        return None


class MockReaction:
    def __init__(self, reaction_id="64e000000000000000000001", room_id=ROOM_ID,
                 reactor: Optional[Identity] = None, emoji="👏"):
        reactor = reactor or Identity(id=USER_A_ID, username="alice")
        self.id = reaction_id
        self.room_id = room_id
        self.user_id = reactor.id
        self.username = reactor.username
        self.emoji = emoji
        self.created_at = datetime.utcnow()


class MockInvitation:
    def __init__(self, invitation_id="64f000000000000000000001", room_id=ROOM_ID,
                 inviter: Optional[Identity] = None, invitee_id=USER_B_ID, status="pending",
                 room_name="Friday Python meetup"):
        inviter = inviter or Identity(id=USER_A_ID, username="alice")
        self.id = invitation_id
        self.room_id = room_id
        self.room_name = room_name
        self.inviter_id = inviter.id
        self.inviter_username = inviter.username
        self.invitee_id = invitee_id
        self.status = status
        self.created_at = datetime.utcnow()
        self.responded_at = None

    def respond(self, accepted: bool):
        self.status = "accepted" if accepted else "declined"
        self.responded_at = datetime.utcnow()


class MockNotification:
    def __init__(self, notification_id="650000000000000000000001", user_id=USER_B_ID,
                 type="room_invitation", title="New room invitation", message="alice invited you",
                 data=None, is_read=False):
        self.id = notification_id
        self.user_id = user_id
        self.type = type
        self.title = title
        self.message = message
        self.data = data
        self.is_read = is_read
        self.created_at = datetime.utcnow()


@pytest.fixture
def live_room(identity_a, identity_b) -> MockRoom:
    """alice가 호스트, bob이 참여 중인 진행 중 채팅방"""
    return MockRoom(host=identity_a, participants=[identity_a.id, identity_b.id])
