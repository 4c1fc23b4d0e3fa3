import pytest
from unittest.mock import AsyncMock, patch
from httpx import AsyncClient
from fastapi import status

from roomloop.core.errors import ValidationException
from roomloop.core.validators import Validator, MAX_MESSAGE_LENGTH

from conftest import MockMessage, MockRoom, ROOM_ID, USER_B_ID, auth_headers


class TestMessageValidation:
    """메시지 내용 검증 테스트"""

    def test_text_is_stripped(self):
        assert Validator.validate_message_text("  hello  ") == "hello"

    @pytest.mark.parametrize("text", ["", "   ", "x" * (MAX_MESSAGE_LENGTH + 1), "bell\x07"])
    def test_invalid_text(self, text):
        with pytest.raises(ValidationException):
            Validator.validate_message_text(text)


class TestMessagesAPI:
    """메시지 API 테스트"""

    @pytest.mark.asyncio
    async def test_send_message(self, client: AsyncClient, token_b, identity_b, live_room):
        message = MockMessage(sender=identity_b, text="hello room")

        with patch("roomloop.services.room_service.find_room_by_id", AsyncMock(return_value=live_room)), \
             patch("roomloop.services.message_service.create_message",
                   AsyncMock(return_value=message)) as create_message:
            response = await client.post("/api/messages", json={
                "roomId": ROOM_ID,
                "text": "  hello room  "
            }, headers=auth_headers(token_b))

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["text"] == "hello room"
        assert data["user_id"] == USER_B_ID
        assert data["reactions"] == []
        create_message.assert_awaited_once_with(ROOM_ID, identity_b, "hello room")

    @pytest.mark.asyncio
    async def test_send_message_not_participant(self, client: AsyncClient, token_b, identity_a):
        room = MockRoom(host=identity_a)

        with patch("roomloop.services.room_service.find_room_by_id", AsyncMock(return_value=room)):
            response = await client.post("/api/messages", json={
                "roomId": ROOM_ID,
                "text": "let me in"
            }, headers=auth_headers(token_b))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_send_empty_message(self, client: AsyncClient, token_b):
        response = await client.post("/api/messages", json={
            "roomId": ROOM_ID,
            "text": "   "
        }, headers=auth_headers(token_b))

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_get_room_messages(self, client: AsyncClient, token_a, live_room):
        messages = [MockMessage(message_id=f"64d00000000000000000000{i}", text=f"m{i}") for i in range(1, 4)]

        with patch("roomloop.services.room_service.find_room_by_id", AsyncMock(return_value=live_room)), \
             patch("roomloop.services.message_service.get_room_messages", AsyncMock(return_value=messages)), \
             patch("roomloop.services.message_service.get_room_messages_count", AsyncMock(return_value=10)):
            response = await client.get(
                f"/api/messages/room/{ROOM_ID}",
                params={"limit": 3, "skip": 0},
                headers=auth_headers(token_a),
            )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [m["text"] for m in data["messages"]] == ["m1", "m2", "m3"]
        assert data["total"] == 10
        assert data["has_next"] is True

    @pytest.mark.asyncio
    async def test_get_room_messages_requires_participation(self, client: AsyncClient, token_b, identity_a):
        room = MockRoom(host=identity_a)

        with patch("roomloop.services.room_service.find_room_by_id", AsyncMock(return_value=room)):
            response = await client.get(f"/api/messages/room/{ROOM_ID}", headers=auth_headers(token_b))

        assert response.status_code == status.HTTP_403_FORBIDDEN
