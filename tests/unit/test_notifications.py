import pytest
from unittest.mock import AsyncMock, patch
from httpx import AsyncClient
from fastapi import status

from roomloop.realtime.auth import Identity
from roomloop.realtime.publish import build_notification_payload, publish_notification_created

from conftest import MockNotification, USER_A_ID, USER_B_ID, auth_headers

NOTIFICATION_ID = "650000000000000000000001"


class TestNotificationsAPI:
    """알림 API 테스트"""

    @pytest.mark.asyncio
    async def test_list_notifications(self, client: AsyncClient, token_b):
        with patch("roomloop.services.notification_service.get_user_notifications",
                   AsyncMock(return_value=[MockNotification()])), \
             patch("roomloop.services.notification_service.count_unread", AsyncMock(return_value=1)):
            response = await client.get("/api/notifications", headers=auth_headers(token_b))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["unread_count"] == 1
        assert data["notifications"][0]["id"] == NOTIFICATION_ID

    @pytest.mark.asyncio
    async def test_mark_read(self, client: AsyncClient, token_b):
        notification = MockNotification(user_id=USER_B_ID)

        async def mark_as_read(notification):
            notification.is_read = True
            return notification

        with patch("roomloop.services.notification_service.find_notification_by_id",
                   AsyncMock(return_value=notification)), \
             patch("roomloop.services.notification_service.mark_as_read", AsyncMock(side_effect=mark_as_read)):
            response = await client.put(f"/api/notifications/{NOTIFICATION_ID}/read", headers=auth_headers(token_b))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_read"] is True

    @pytest.mark.asyncio
    async def test_cannot_read_someone_elses_notification(self, client: AsyncClient, token_a):
        with patch("roomloop.services.notification_service.find_notification_by_id",
                   AsyncMock(return_value=MockNotification(user_id=USER_B_ID))):
            response = await client.put(f"/api/notifications/{NOTIFICATION_ID}/read", headers=auth_headers(token_a))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_read_all(self, client: AsyncClient, token_b):
        with patch("roomloop.services.notification_service.mark_all_as_read",
                   AsyncMock(return_value=3)) as mark_all:
            response = await client.put("/api/notifications/read-all", headers=auth_headers(token_b))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "updated": 3}
        mark_all.assert_awaited_once_with(USER_B_ID)


class TestNotificationPush:
    """개인 알림 채널 전송 테스트"""

    def test_payload(self):
        payload = build_notification_payload(MockNotification(data={"roomId": "r1"}))

        assert payload["id"] == NOTIFICATION_ID
        assert payload["type"] == "room_invitation"
        assert payload["isRead"] is False
        assert payload["data"] == {"roomId": "r1"}

    @pytest.mark.asyncio
    async def test_pushed_to_every_connection_of_recipient(self, registry, transport, broadcaster):
        registry.on_connect("sid-b1", Identity(id=USER_B_ID, username="bob"))
        registry.on_connect("sid-b2", Identity(id=USER_B_ID, username="bob"))
        registry.on_connect("sid-a", Identity(id=USER_A_ID, username="alice"))

        delivered = await publish_notification_created(broadcaster, MockNotification(user_id=USER_B_ID))

        assert delivered == 2
        assert transport.events_for("sid-a") == []
        assert [event for event, _ in transport.events_for("sid-b1")] == ["newNotification"]

    @pytest.mark.asyncio
    async def test_recipient_offline(self, registry, transport, broadcaster):
        delivered = await publish_notification_created(broadcaster, MockNotification(user_id=USER_B_ID))

        assert delivered == 0
        assert transport.emitted == []
