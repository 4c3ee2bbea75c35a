"""Tests for the notification store, the dispatcher and the notifications endpoints."""

from unittest.mock import AsyncMock

import pytest

from app.api.notifications.schemas import NotificationType, RelatedType
from app.api.notifications.service import NotificationService, dispatch_notification
from app.core.exceptions import NotificationNotFound
from app.websocket import websocket_manager


@pytest.fixture
def service(db):
    return NotificationService(db)


def _notify(service, user_id, title="Hello"):
    return service.create(user_id, NotificationType.MESSAGE, title, "body")


class TestNotificationService:

    def test_create_and_list(self, service, alice):
        _notify(service, "alice", "first")
        _notify(service, "alice", "second")

        titles = [n.title for n in service.list_for_user("alice")]
        assert titles == ["second", "first"]
        assert service.unread_count("alice") == 2

    def test_list_limit(self, service, alice):
        for i in range(5):
            _notify(service, "alice", f"n{i}")

        assert len(service.list_for_user("alice", limit=3)) == 3

    def test_mark_read_scoped_to_owner(self, service, alice, bob):
        notification = _notify(service, "alice")

        with pytest.raises(NotificationNotFound):
            service.mark_read(notification.id, "bob")

        service.mark_read(notification.id, "alice")
        assert service.unread_count("alice") == 0

    def test_mark_all_read(self, service, alice, bob):
        _notify(service, "alice")
        _notify(service, "alice")
        _notify(service, "bob")

        assert service.mark_all_read("alice") == 2
        assert service.unread_count("alice") == 0
        assert service.unread_count("bob") == 1

    def test_delete(self, service, alice, bob):
        notification = _notify(service, "alice")

        with pytest.raises(NotificationNotFound):
            service.delete(notification.id, "bob")

        service.delete(notification.id, "alice")
        assert service.list_for_user("alice") == []
        with pytest.raises(NotificationNotFound):
            service.delete(notification.id, "alice")


class TestDispatch:

    @pytest.mark.asyncio
    async def test_pushes_to_live_sessions(self, db, alice, monkeypatch):
        emit = AsyncMock()
        monkeypatch.setattr(websocket_manager.sio, "emit", emit)
        websocket_manager.register_connection("alice", "sid-1")

        notification = await dispatch_notification(
            db, "alice", NotificationType.FRIEND_REQUEST, "New Friend Request", "Bob sent you a friend request",
            related_id="bob", related_type=RelatedType.USER,
        )

        assert notification is not None
        emit.assert_awaited_once()
        event, payload = emit.await_args.args
        assert event == "notification"
        assert payload["type"] == "friend_request"
        assert payload["relatedId"] == "bob"
        assert emit.await_args.kwargs["to"] == "sid-1"

    @pytest.mark.asyncio
    async def test_socket_failure_is_swallowed(self, db, alice, monkeypatch):
        monkeypatch.setattr(websocket_manager.sio, "emit", AsyncMock(side_effect=RuntimeError("gone")))
        websocket_manager.register_connection("alice", "sid-1")

        notification = await dispatch_notification(db, "alice", NotificationType.MESSAGE, "t", "m")

        assert notification.id is not None

    @pytest.mark.asyncio
    async def test_offline_user_gets_stored_notification_only(self, db, alice, monkeypatch):
        emit = AsyncMock()
        monkeypatch.setattr(websocket_manager.sio, "emit", emit)

        await dispatch_notification(db, "alice", NotificationType.MESSAGE, "t", "m")

        emit.assert_not_awaited()
        assert NotificationService(db).unread_count("alice") == 1


class TestNotificationsApi:

    def test_friend_request_shows_up_for_recipient(self, client, alice, bob, auth_headers):
        client.post("/api/friend-requests", json={"friendId": "bob"}, headers=auth_headers("alice"))

        response = client.get("/api/notifications", headers=auth_headers("bob"))
        assert response.status_code == 200
        items = response.json()
        assert len(items) == 1
        assert items[0]["type"] == "friend_request"
        assert items[0]["relatedId"] == "alice"
        assert items[0]["isRead"] is False

        count = client.get("/api/notifications/unread-count", headers=auth_headers("bob"))
        assert count.json() == {"count": 1}

    def test_read_and_delete(self, client, alice, bob, auth_headers):
        client.post("/api/friend-requests", json={"friendId": "bob"}, headers=auth_headers("alice"))
        notification_id = client.get("/api/notifications", headers=auth_headers("bob")).json()[0]["id"]

        foreign = client.put(f"/api/notifications/{notification_id}/read", headers=auth_headers("alice"))
        assert foreign.status_code == 404

        read = client.put(f"/api/notifications/{notification_id}/read", headers=auth_headers("bob"))
        assert read.status_code == 200
        assert client.get("/api/notifications/unread-count", headers=auth_headers("bob")).json()["count"] == 0

        deleted = client.delete(f"/api/notifications/{notification_id}", headers=auth_headers("bob"))
        assert deleted.json() == {"message": "Notification deleted"}
        assert client.get("/api/notifications", headers=auth_headers("bob")).json() == []

    def test_read_all(self, client, alice, bob, carol, auth_headers):
        client.post("/api/friend-requests", json={"friendId": "bob"}, headers=auth_headers("alice"))
        client.post("/api/friend-requests", json={"friendId": "bob"}, headers=auth_headers("carol"))

        response = client.put("/api/notifications/read-all", headers=auth_headers("bob"))

        assert response.status_code == 200
        assert client.get("/api/notifications/unread-count", headers=auth_headers("bob")).json()["count"] == 0
