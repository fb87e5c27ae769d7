"""
alembic/env.py

Migration environment for the readiness store (uploads, field mappings,
validation runs, readiness reports).
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from db.base import Base
from db.config import normalize_postgres_url, resolve_database_url
from db.models import (  # noqa: F401  imports register tables on Base.metadata
    FieldMappingRecord,
    ReadinessReport,
    Upload,
    ValidationRun,
)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

_COMPARE_OPTIONS = {"compare_type": True, "compare_server_default": True}


def _migration_url() -> str:
    """
    `-x db_url=...` wins, then sqlalchemy.url from alembic.ini, then the
    application's own database URL resolution.
    """

    override = context.get_x_argument(as_dictionary=True).get("db_url", "").strip()
    ini_url = (config.get_main_option("sqlalchemy.url") or "").strip()
    url = normalize_postgres_url(override or ini_url) if (override or ini_url) else resolve_database_url()

    if not url.startswith("postgresql"):
        raise RuntimeError("Readiness migrations target PostgreSQL only.")
    return url


def run_migrations_offline() -> None:
    context.configure(
        url=_migration_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = _migration_url()
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, **_COMPARE_OPTIONS)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
