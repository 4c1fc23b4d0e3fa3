from datetime import datetime, timedelta

import pytest
from unittest.mock import AsyncMock, patch
from httpx import AsyncClient
from fastapi import status

from conftest import MockRoom, ROOM_ID, USER_A_ID, USER_B_ID, auth_headers


def _find_room(room):
    return patch("roomloop.services.room_service.find_room_by_id", AsyncMock(return_value=room))


async def _add_participant(room, user_id):
    room.participants.append(user_id)
    return room


class TestCreateAndListRooms:
    """채팅방 생성/조회 테스트"""

    @pytest.mark.asyncio
    async def test_create_room(self, client: AsyncClient, token_a, identity_a):
        created = MockRoom(host=identity_a, name="Rust study")
        starts_at = datetime.utcnow() + timedelta(hours=1)

        with patch("roomloop.services.room_service.create_room", AsyncMock(return_value=created)) as create_room:
            response = await client.post("/api/rooms", json={
                "name": "Rust study",
                "starts_at": starts_at.isoformat() + "Z",
                "ends_at": (starts_at + timedelta(hours=2)).isoformat() + "Z",
                "tags": ["Rust", "rust", " study "],
            }, headers=auth_headers(token_a))

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["host_id"] == USER_A_ID
        assert data["participant_count"] == 1

        host, room_data = create_room.call_args.args
        assert host == identity_a
        assert room_data.tags == ["rust", "study"]
        assert room_data.starts_at.tzinfo is None

    @pytest.mark.asyncio
    async def test_create_room_end_before_start(self, client: AsyncClient, token_a):
        starts_at = datetime.utcnow() + timedelta(hours=2)

        response = await client.post("/api/rooms", json={
            "name": "Backwards",
            "starts_at": starts_at.isoformat(),
            "ends_at": (starts_at - timedelta(hours=1)).isoformat(),
        }, headers=auth_headers(token_a))

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["message"] == "Room schedule validation failed"

    @pytest.mark.asyncio
    async def test_create_room_too_long(self, client: AsyncClient, token_a):
        starts_at = datetime.utcnow() + timedelta(hours=1)

        response = await client.post("/api/rooms", json={
            "name": "Marathon",
            "starts_at": starts_at.isoformat(),
            "ends_at": (starts_at + timedelta(hours=13)).isoformat(),
        }, headers=auth_headers(token_a))

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_list_rooms_with_status_filter(self, client: AsyncClient, token_a, live_room):
        with patch("roomloop.services.room_service.get_visible_rooms",
                   AsyncMock(return_value=[live_room])) as get_rooms:
            response = await client.get("/api/rooms", params={"status": "live"}, headers=auth_headers(token_a))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert len(data) == 1
        assert data[0]["status"] == "live"
        assert get_rooms.call_args.kwargs["status"] == "live"
        assert get_rooms.call_args.args[0] == USER_A_ID

    @pytest.mark.asyncio
    async def test_list_rooms_rejects_unknown_status(self, client: AsyncClient, token_a):
        response = await client.get("/api/rooms", params={"status": "cancelled"}, headers=auth_headers(token_a))
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_rooms_require_token(self, client: AsyncClient):
        response = await client.get("/api/rooms")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_private_room_hidden_from_outsiders(self, client: AsyncClient, token_b, identity_a):
        private_room = MockRoom(host=identity_a, is_private=True)

        with _find_room(private_room):
            response = await client.get(f"/api/rooms/{ROOM_ID}", headers=auth_headers(token_b))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_unknown_room(self, client: AsyncClient, token_a):
        with _find_room(None):
            response = await client.get("/api/rooms/not-an-object-id", headers=auth_headers(token_a))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Room not found"


class TestRoomMembership:
    """채팅방 참여/나가기/삭제 테스트"""

    @pytest.mark.asyncio
    async def test_join_public_room(self, client: AsyncClient, token_b, identity_a):
        room = MockRoom(host=identity_a)

        with _find_room(room), \
             patch("roomloop.services.room_service.add_participant", AsyncMock(side_effect=_add_participant)):
            response = await client.post(f"/api/rooms/{ROOM_ID}/join", headers=auth_headers(token_b))

        assert response.status_code == status.HTTP_200_OK
        assert USER_B_ID in response.json()["participants"]

    @pytest.mark.asyncio
    async def test_join_private_room_without_invitation(self, client: AsyncClient, token_b, identity_a):
        room = MockRoom(host=identity_a, is_private=True)

        with _find_room(room), \
             patch("roomloop.services.invitation_service.has_accepted_or_pending_invitation",
                   AsyncMock(return_value=False)):
            response = await client.post(f"/api/rooms/{ROOM_ID}/join", headers=auth_headers(token_b))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "This room is invitation only"

    @pytest.mark.asyncio
    async def test_join_full_room(self, client: AsyncClient, token_b, identity_a):
        room = MockRoom(host=identity_a, participants=[USER_A_ID, "64b000000000000000000009"], max_participants=2)

        with _find_room(room):
            response = await client.post(f"/api/rooms/{ROOM_ID}/join", headers=auth_headers(token_b))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "This room is full"

    @pytest.mark.asyncio
    async def test_join_ended_room(self, client: AsyncClient, token_b, identity_a):
        now = datetime.utcnow()
        room = MockRoom(host=identity_a, starts_at=now - timedelta(hours=3), ends_at=now - timedelta(hours=1))

        with _find_room(room):
            response = await client.post(f"/api/rooms/{ROOM_ID}/join", headers=auth_headers(token_b))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_host_cannot_leave(self, client: AsyncClient, token_a, live_room):
        with _find_room(live_room):
            response = await client.post(f"/api/rooms/{ROOM_ID}/leave", headers=auth_headers(token_a))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_only_host_can_delete(self, client: AsyncClient, token_a, token_b, live_room):
        with _find_room(live_room), \
             patch("roomloop.services.room_service.delete_room", AsyncMock()) as delete_room:
            forbidden = await client.delete(f"/api/rooms/{ROOM_ID}", headers=auth_headers(token_b))
            deleted = await client.delete(f"/api/rooms/{ROOM_ID}", headers=auth_headers(token_a))

        assert forbidden.status_code == status.HTTP_403_FORBIDDEN
        assert deleted.status_code == status.HTTP_204_NO_CONTENT
        delete_room.assert_awaited_once_with(live_room)

    @pytest.mark.asyncio
    async def test_presence_requires_participation(self, client: AsyncClient, identity_a):
        from conftest import make_token
        outsider = make_token("64b000000000000000000009", "mallory")
        room = MockRoom(host=identity_a)

        with _find_room(room):
            response = await client.get(f"/api/rooms/{ROOM_ID}/presence", headers=auth_headers(outsider))

        assert response.status_code == status.HTTP_403_FORBIDDEN
