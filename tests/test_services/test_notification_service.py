"""Тесты сервиса уведомлений и проверки дублей."""
import pytest
from sqlalchemy.exc import OperationalError

from taskhub.core.exceptions import DuplicateError, NotFoundException
from taskhub.models.notification import Notification, NotificationType
from taskhub.schemas.notification import NotificationCreate
from taskhub.services.notification_service import NotificationDeduplicationGate, NotificationService
from tests.conftest import create_group, create_project, create_user


def _data(user_id, project_id=None, alert_type=None, title="Title") -> NotificationCreate:
    return NotificationCreate(
        user_id=user_id,
        type=NotificationType.DEADLINE_APPROACHING.value,
        title=title,
        message="Message",
        project_id=project_id,
        alert_type=alert_type,
        metadata={"key": "value"},
    )


class TestNotificationService:
    """Тесты NotificationService."""

    def test_create(self, db_session):
        user = create_user(db_session)
        service = NotificationService(db_session)

        notification = service.create(_data(user.id))
        assert notification.id is not None
        assert notification.is_read is False
        assert notification.meta == {"key": "value"}

    def test_exists(self, db_session):
        user = create_user(db_session)
        project = create_project(db_session, create_group(db_session), user)
        service = NotificationService(db_session)

        assert service.exists(project.id, "deadline_critical") is False
        service.create(_data(user.id, project.id, "deadline_critical"))
        assert service.exists(project.id, "deadline_critical") is True
        assert service.exists(project.id, "deadline_urgent") is False

    def test_duplicate_alert_rejected_by_storage(self, db_session):
        user = create_user(db_session)
        project = create_project(db_session, create_group(db_session), user)
        service = NotificationService(db_session)
        service.create(_data(user.id, project.id, "deadline_urgent"))
        db_session.commit()

        with pytest.raises(DuplicateError):
            service.create(_data(user.id, project.id, "deadline_urgent"))

        count = db_session.query(Notification).filter_by(project_id=project.id).count()
        assert count == 1

    def test_regular_notifications_are_not_deduplicated(self, db_session):
        user = create_user(db_session)
        project = create_project(db_session, create_group(db_session), user)
        service = NotificationService(db_session)

        service.create(_data(user.id, project.id))
        service.create(_data(user.id, project.id))
        assert db_session.query(Notification).count() == 2

    def test_get_for_user_newest_first(self, db_session):
        alice = create_user(db_session, "alice")
        bob = create_user(db_session, "bob")
        service = NotificationService(db_session)
        service.create(_data(alice.id, title="first"))
        service.create(_data(alice.id, title="second"))
        service.create(_data(bob.id, title="other"))

        items = service.get_for_user(alice.id)
        assert [n.title for n in items] == ["second", "first"]
        assert len(service.get_for_user(alice.id, limit=1)) == 1

    def test_unread_and_mark_read(self, db_session):
        user = create_user(db_session)
        service = NotificationService(db_session)
        first = service.create(_data(user.id))
        service.create(_data(user.id))
        assert service.count_unread(user.id) == 2

        service.mark_read(first.id)
        assert service.count_unread(user.id) == 1

        assert service.mark_all_read(user.id) == 1
        assert service.count_unread(user.id) == 0

    def test_delete(self, db_session):
        user = create_user(db_session)
        service = NotificationService(db_session)
        notification = service.create(_data(user.id))

        service.delete(notification.id)
        assert service.get_by_id(notification.id) is None

    def test_missing_notification_raises(self, db_session):
        service = NotificationService(db_session)
        with pytest.raises(NotFoundException):
            service.mark_read(999)
        with pytest.raises(NotFoundException):
            service.delete(999)


class TestDeduplicationGate:
    """Тесты NotificationDeduplicationGate."""

    def test_already_sent(self, db_session):
        user = create_user(db_session)
        project = create_project(db_session, create_group(db_session), user)
        service = NotificationService(db_session)
        gate = NotificationDeduplicationGate(service)

        assert gate.already_sent(project.id, "smart_start_reminder") is False
        service.create(_data(user.id, project.id, "smart_start_reminder"))
        assert gate.already_sent(project.id, "smart_start_reminder") is True

    def test_lookup_failure_is_treated_as_not_sent(self, db_session):
        service = NotificationService(db_session)

        def broken(project_id, alert_type):
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

        service.exists = broken
        assert NotificationDeduplicationGate(service).already_sent(1, "deadline_urgent") is False


class TestDeleteAllForUser:

    def test_deletes_only_given_user(self, db_session):
        alice = create_user(db_session, "alice")
        bob = create_user(db_session, "bob")
        service = NotificationService(db_session)
        service.create(_data(alice.id))
        service.create(_data(alice.id))
        service.create(_data(bob.id))

        assert service.delete_all_for_user(alice.id) == 2
        assert service.get_for_user(alice.id) == []
        assert len(service.get_for_user(bob.id)) == 1
        assert service.delete_all_for_user(alice.id) == 0
