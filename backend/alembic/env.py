"""Alembic migration environment for the Eventify schema.

The target database comes from ``DATABASE_URL`` (eventify.config) unless
overridden on the command line with ``alembic -x url=... upgrade head``.
SQLite cannot ALTER most constraints in place, so migrations against it are
rendered in batch mode.
"""
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from eventify.config import settings
from eventify.database import Base
from eventify.models.user import User                    # noqa: F401
from eventify.models.event import Event                  # noqa: F401
from eventify.models.participation import Participation  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("url", settings.DATABASE_URL)


def _configure_options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        # enum and String length changes on events/participations matter
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Write the migration SQL to stdout for review or manual apply."""
    url = _database_url()
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = _database_url()
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = url
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_options(url))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
