"""
Tests for appointment messaging, the notification inbox and device push.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

from techserve.config import settings
from techserve.models.auth import Role
from techserve.queries import appointment_queries, message_queries, notification_queries
from techserve.services.notifier import EmailSender, notify_technician_of_decision

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestMessages:
    async def test_participant_lists_oldest_first(self, client, login_as, monkeypatch, make_appointment):
        appointment = make_appointment()
        login_as(Role.TECHNICIAN, appointment["technician_id"])
        rows = [
            {"id": 1, "appointment_id": 1, "sender_id": appointment["client_id"],
             "sender_role": "USER", "content": "Are you on the way?", "sent_at": NOW},
            {"id": 2, "appointment_id": 1, "sender_id": appointment["technician_id"],
             "sender_role": "TECHNICIAN", "content": "Ten minutes", "sent_at": NOW},
        ]
        list_messages = AsyncMock(return_value=rows)
        monkeypatch.setattr(appointment_queries, "get_appointment", AsyncMock(return_value=appointment))
        monkeypatch.setattr(message_queries, "list_messages", list_messages)
        monkeypatch.setattr(message_queries, "count_messages", AsyncMock(return_value=2))

        response = await client.get("/messages/appointment/1")

        assert response.status_code == 200
        body = response.json()
        assert [m["id"] for m in body["items"]] == [1, 2]
        assert body["items"][1]["senderRole"] == "TECHNICIAN"
        assert list_messages.await_args.args[1:] == (1, 10, 0)

    async def test_outsider_is_refused(self, client, login_as, monkeypatch, make_appointment):
        login_as(Role.USER)
        monkeypatch.setattr(appointment_queries, "get_appointment", AsyncMock(return_value=make_appointment()))

        response = await client.get("/messages/appointment/1")

        assert response.status_code == 403

    async def test_send_records_sender(self, client, login_as, monkeypatch, make_appointment):
        appointment = make_appointment()
        user = login_as(Role.USER, appointment["client_id"])
        create = AsyncMock(return_value={
            "id": 3, "appointment_id": 1, "sender_id": user.id,
            "sender_role": "USER", "content": "Thanks", "sent_at": NOW,
        })
        monkeypatch.setattr(appointment_queries, "get_appointment", AsyncMock(return_value=appointment))
        monkeypatch.setattr(message_queries, "create_message", create)

        response = await client.post("/messages/appointment/1", json={"content": "Thanks"})

        assert response.status_code == 201
        assert create.await_args.args[1:] == (1, user.id, "USER", "Thanks")

    async def test_empty_message(self, client, login_as):
        login_as(Role.USER)

        response = await client.post("/messages/appointment/1", json={"content": ""})

        assert response.status_code == 400


class TestInbox:
    async def test_lists_unread(self, client, login_as, monkeypatch):
        user = login_as(Role.TECHNICIAN)
        list_notifications = AsyncMock(return_value=[
            {"notification_id": 5, "message": "Your verification has been approved",
             "is_read": False, "created_at": NOW},
        ])
        monkeypatch.setattr(notification_queries, "list_notifications", list_notifications)

        response = await client.get("/notifications/", params={"status": "unread"})

        assert response.status_code == 200
        assert response.json()[0]["notificationId"] == 5
        assert list_notifications.await_args.args[1:] == (user.id, "unread")

    async def test_rejects_unknown_filter(self, client, login_as):
        login_as(Role.USER)

        response = await client.get("/notifications/", params={"status": "archived"})

        assert response.status_code == 400

    async def test_unread_count(self, client, login_as, monkeypatch):
        login_as(Role.USER)
        monkeypatch.setattr(notification_queries, "count_unread", AsyncMock(return_value=3))

        response = await client.get("/notifications/unread/count")

        assert response.json() == {"unread_count": 3}

    async def test_mark_missing_notification(self, client, login_as, monkeypatch):
        login_as(Role.USER)
        monkeypatch.setattr(notification_queries, "mark_read", AsyncMock(return_value=False))

        response = await client.put("/notifications/9/mark-read")

        assert response.status_code == 404

    async def test_mark_all_read(self, client, login_as, monkeypatch):
        user = login_as(Role.USER)
        mark_all = AsyncMock(return_value=None)
        monkeypatch.setattr(notification_queries, "mark_all_read", mark_all)

        response = await client.put("/notifications/mark-all-read")

        assert response.status_code == 200
        assert mark_all.await_args.args[1] == user.id


class TestDevicePush:
    async def test_register_token(self, client, login_as, monkeypatch):
        user = login_as(Role.TECHNICIAN)
        upsert = AsyncMock(return_value={})
        monkeypatch.setattr(notification_queries, "upsert_device_token", upsert)

        response = await client.post("/notifications/register", json={"token": "fcm-token"})

        assert response.status_code == 200
        assert upsert.await_args.args[1:] == ("fcm-token", user.id, "TECHNICIAN")

    async def test_admin_sends_push(self, client, login_as):
        login_as(Role.ADMIN)

        response = await client.post("/notifications/send", json={
            "token": "fcm-token", "title": "Hello", "body": "World", "data": {"appointmentId": 1}
        })

        assert response.status_code == 200
        assert response.json() == {
            "success": True, "token": "fcm-token", "title": "Hello", "body": "World",
            "data": {"appointmentId": 1},
        }

    async def test_only_admin_sends_push(self, client, login_as):
        login_as(Role.USER)

        response = await client.post(
            "/notifications/send", json={"token": "fcm-token", "title": "Hello", "body": "World"}
        )

        assert response.status_code == 403


async def test_decision_notification_text(conn):
    await notify_technician_of_decision(conn, "tech-1", "reject", "Blurry photo")

    assert conn.execute.await_args.args[1:] == ("Your verification has been rejected: Blurry photo", "tech-1")


def test_verification_mail_links_back_to_api(caplog):
    caplog.set_level("INFO", logger="techserve.services.notifier")

    EmailSender().send_verification("a@example.com", "amina", "tok123", "/verify-email")

    assert f"{settings.base_url}/verify-email?token=tok123" in caplog.text
