"""Тесты API уведомлений."""
from datetime import timedelta

from taskhub.models.notification import NotificationType
from taskhub.schemas.notification import NotificationCreate
from taskhub.services.notification_service import NotificationService
from tests.conftest import create_group, create_project, create_user


def _create_notification(db_session, user_id, title="Status changed"):
    notification = NotificationService(db_session).create(NotificationCreate(
        user_id=user_id,
        type=NotificationType.STATUS_CHANGED.value,
        title=title,
        message="Project moved to review",
        metadata={"status": "IN_PROGRESS"},
    ))
    db_session.commit()
    return notification


class TestNotificationList:
    """Тесты чтения уведомлений."""

    def test_empty(self, client, db_session):
        user = create_user(db_session)
        resp = client.get("/api/v1/notifications", params={"user_id": user.id})
        assert resp.status_code == 200
        assert resp.json() == {"items": [], "total": 0}

    def test_list_newest_first(self, client, db_session):
        user = create_user(db_session)
        _create_notification(db_session, user.id, "first")
        _create_notification(db_session, user.id, "second")

        data = client.get("/api/v1/notifications", params={"user_id": user.id}).json()
        assert data["total"] == 2
        assert [item["title"] for item in data["items"]] == ["second", "first"]
        assert data["items"][0]["metadata"] == {"status": "IN_PROGRESS"}
        assert data["items"][0]["is_read"] is False

    def test_limit(self, client, db_session):
        user = create_user(db_session)
        for i in range(3):
            _create_notification(db_session, user.id, f"n{i}")

        data = client.get("/api/v1/notifications", params={"user_id": user.id, "limit": 2}).json()
        assert data["total"] == 2

    def test_user_id_is_required(self, client):
        assert client.get("/api/v1/notifications").status_code == 422

    def test_unread_count(self, client, db_session):
        user = create_user(db_session)
        _create_notification(db_session, user.id)
        _create_notification(db_session, user.id)

        resp = client.get("/api/v1/notifications/unread-count", params={"user_id": user.id})
        assert resp.status_code == 200
        assert resp.json() == {"unread_count": 2}


class TestNotificationUpdates:
    """Тесты изменения уведомлений."""

    def test_mark_read(self, client, db_session):
        user = create_user(db_session)
        notification = _create_notification(db_session, user.id)

        resp = client.patch(f"/api/v1/notifications/{notification.id}/read")
        assert resp.status_code == 200
        assert resp.json()["is_read"] is True

        count = client.get("/api/v1/notifications/unread-count", params={"user_id": user.id})
        assert count.json()["unread_count"] == 0

    def test_mark_all_read(self, client, db_session):
        user = create_user(db_session)
        other = create_user(db_session, "bob")
        _create_notification(db_session, user.id)
        _create_notification(db_session, user.id)
        _create_notification(db_session, other.id)

        resp = client.patch("/api/v1/notifications/mark-all-read", params={"user_id": user.id})
        assert resp.status_code == 200
        assert resp.json() == {"updated": 2}

        count = client.get("/api/v1/notifications/unread-count", params={"user_id": other.id})
        assert count.json()["unread_count"] == 1

    def test_delete(self, client, db_session):
        user = create_user(db_session)
        notification = _create_notification(db_session, user.id)

        resp = client.delete(f"/api/v1/notifications/{notification.id}")
        assert resp.status_code == 204

        data = client.get("/api/v1/notifications", params={"user_id": user.id}).json()
        assert data["total"] == 0

    def test_delete_all_for_user(self, client, db_session):
        user = create_user(db_session)
        other = create_user(db_session, "bob")
        _create_notification(db_session, user.id)
        _create_notification(db_session, user.id)
        _create_notification(db_session, other.id)

        resp = client.delete("/api/v1/notifications", params={"user_id": user.id})
        assert resp.status_code == 200
        assert resp.json() == {"deleted": 2}

        data = client.get("/api/v1/notifications", params={"user_id": user.id}).json()
        assert data["total"] == 0
        data = client.get("/api/v1/notifications", params={"user_id": other.id}).json()
        assert data["total"] == 1

    def test_delete_missing(self, client):
        assert client.delete("/api/v1/notifications/999").status_code == 404


class TestManualCheck:
    """Тесты ручного запуска проверки дедлайнов."""

    def test_check_sends_alerts(self, client, db_session, channel):
        user = create_user(db_session)
        create_project(db_session, create_group(db_session), user, due_in=timedelta(hours=23))

        resp = client.post("/api/v1/notifications/check")
        assert resp.status_code == 200
        assert resp.json() == {
            "skipped": False,
            "projects_checked": 1,
            "alerts_sent": 1,
            "failures": 0,
            "error": None,
        }
        assert len(channel.events) == 1

        items = client.get("/api/v1/notifications", params={"user_id": user.id}).json()["items"]
        assert [item["alert_type"] for item in items] == ["deadline_critical"]
        assert items[0]["title"] == "24-Hour Deadline Alert"

    def test_repeated_check_does_not_duplicate(self, client, db_session):
        user = create_user(db_session)
        create_project(db_session, create_group(db_session), user, due_in=timedelta(hours=1))

        first = client.post("/api/v1/notifications/check").json()
        second = client.post("/api/v1/notifications/check").json()

        assert first["alerts_sent"] == 3
        assert second["alerts_sent"] == 0
        data = client.get("/api/v1/notifications", params={"user_id": user.id}).json()
        assert data["total"] == 3

    def test_check_without_scheduler_returns_503(self, client):
        from taskhub.main import app

        app.state.notification_scheduler = None
        resp = client.post("/api/v1/notifications/check")
        assert resp.status_code == 503
        assert resp.json()["error_code"] == "SCHEDULER_UNAVAILABLE"
