"""
Окружение Alembic для схемы TaskHub.
"""
from logging.config import fileConfig
import os

from sqlalchemy import create_engine, pool

from alembic import context

# Все модели должны быть импортированы, чтобы Base.metadata знал о таблицах
from taskhub.core.database import Base, _normalize_url
import taskhub.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_database_url() -> str:
    """DATABASE_URL из окружения, иначе sqlalchemy.url из alembic.ini."""
    db_url = os.getenv("DATABASE_URL")
    if db_url:
        return _normalize_url(db_url)
    return config.get_main_option("sqlalchemy.url")


def run_migrations_offline() -> None:
    """Генерация SQL без подключения к БД."""
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(get_database_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
