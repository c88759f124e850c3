"""
Тестовая инфраструктура: фикстуры для SQLite in-memory и FastAPI TestClient.
"""
import os

# Отключаем Telegram и фоновый планировщик при тестах — должно быть ДО импорта taskhub
os.environ["TELEGRAM_BOT_TOKEN"] = ""
os.environ["API_KEY"] = "test-api-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"

# Принудительно обнуляем config бота (мог быть уже загружен с реальным TOKEN)
import telegram_notifier.config
telegram_notifier.config.bot_config.TOKEN = ""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from taskhub.core.database import Base, get_db
from taskhub.main import app as fastapi_app
from taskhub.models.group import Group
from taskhub.models.project import Project, ProjectStatus
from taskhub.models.user import User
from taskhub.realtime.base import LiveChannel
from taskhub.services.notification_scheduler import SmartNotificationScheduler

# Импортируем все модели чтобы Base.metadata знал о них
import taskhub.models  # noqa: F401


# SQLite in-memory с StaticPool — одна БД для всех connections
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Включаем поддержку FK в SQLite
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(bind=engine)

# Фиксированное «сейчас» для детерминированных тестов планировщика
NOW = datetime(2026, 3, 10, 12, 0, 0)


@pytest.fixture(autouse=True)
def setup_database():
    """Создаёт все таблицы перед каждым тестом и удаляет после."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Session:
    """Фикстура тестовой сессии БД."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


class RecordingChannel(LiveChannel):
    """Канал доставки, который запоминает все push-события."""

    def __init__(self):
        self.events: list[tuple[int, str, dict]] = []

    async def push(self, user_id, event, payload):
        self.events.append((user_id, event, payload))


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def scheduler(channel) -> SmartNotificationScheduler:
    """Планировщик на тестовой БД с фиксированными часами."""
    return SmartNotificationScheduler(
        session_factory=TestingSessionLocal,
        channel=channel,
        clock=lambda: NOW,
    )


@pytest.fixture
def client_no_auth(db_session: Session) -> TestClient:
    """FastAPI TestClient БЕЗ API-ключа (для тестов безопасности)."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    fastapi_app.dependency_overrides[get_db] = override_get_db
    with TestClient(fastapi_app, raise_server_exceptions=False) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(db_session: Session, scheduler: SmartNotificationScheduler) -> TestClient:
    """FastAPI TestClient с подменённой БД, планировщиком и API-ключом."""
    def override_get_db():
        try:
            yield db_session
            db_session.commit()
        finally:
            pass

    fastapi_app.dependency_overrides[get_db] = override_get_db
    with TestClient(
        fastapi_app,
        raise_server_exceptions=False,
        headers={"X-API-Key": "test-api-key"},
    ) as c:
        fastapi_app.state.notification_scheduler = scheduler
        yield c
    fastapi_app.dependency_overrides.clear()


# --- Вспомогательные функции для создания тестовых данных ---

def create_user(db: Session, username: str = "alice", telegram_id: int = None) -> User:
    user = User(username=username, email=f"{username}@example.com", telegram_id=telegram_id)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_group(db: Session, name: str = "Backend Team") -> Group:
    group = Group(name=name)
    db.add(group)
    db.commit()
    db.refresh(group)
    return group


def create_project(
    db: Session,
    group: Group,
    assignee: User = None,
    title: str = "Release v2",
    status: ProjectStatus = ProjectStatus.IN_PROGRESS,
    due_in: timedelta = None,
    due_date: datetime = None,
    updated_at: datetime = None,
    estimated_minutes: int = None,
) -> Project:
    """Создаёт проект; due_in отсчитывается от NOW."""
    if due_date is None and due_in is not None:
        due_date = NOW + due_in
    project = Project(
        title=title,
        status=status.value,
        due_date=due_date,
        assigned_to=assignee.id if assignee else None,
        group_id=group.id,
        estimated_minutes=estimated_minutes,
    )
    if updated_at is not None:
        project.updated_at = updated_at
    db.add(project)
    db.commit()
    db.refresh(project)
    return project
