"""Alembic environment for the user store: DATABASE_URL from app settings, Base.metadata for autogenerate."""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

os.environ.setdefault("APP_ENV", "dev")
from warden.core.config import settings
from warden.models import Base, User  # noqa: F401

config = context.config
# alembic.ini carries no logging sections; fileConfig would raise KeyError.
if config.config_file_name is not None:
    try:
        fileConfig(config.config_file_name)
    except KeyError:
        pass

target_metadata = Base.metadata


def _is_sqlite(url: str) -> bool:
    # SQLite cannot ALTER most constraints in place; batch mode recreates tables.
    return url.startswith("sqlite://")


def run_migrations_offline() -> None:
    """Emit SQL for the users schema without connecting."""
    url = settings.DATABASE_URL
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=_is_sqlite(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Connect to DATABASE_URL and apply pending revisions."""
    url = settings.DATABASE_URL
    connectable = create_engine(url, poolclass=NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=_is_sqlite(url),
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
