"""
Alembic environment for the Lebaref CRM schema.

The URL comes from DATABASE_URL (Heroku-style postgres:// accepted) or the
active config class. Autogenerate compares column types and skips empty
revisions; SQLite runs in batch mode so ALTERs work on it.
"""

import logging
import os
import sys
from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from sqlalchemy.engine import make_url
from alembic import context

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import get_config, normalize_database_url
from database.connection import Base
from database import models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger('alembic.env')
target_metadata = Base.metadata


def database_url():
    url = normalize_database_url(os.environ.get('DATABASE_URL')) or get_config().DATABASE_URL
    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")
    return url


def skip_empty_revision(migration_context, revision, directives):
    """Drop autogenerated revisions with no schema changes."""
    if getattr(config.cmd_opts, 'autogenerate', False) and directives[0].upgrade_ops.is_empty():
        directives[:] = []
        logger.info("No schema changes detected; revision not written")


def _configure(**kwargs):
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        process_revision_directives=skip_empty_revision,
        **kwargs
    )


def run_migrations_offline():
    """Emit SQL for the Lebaref tables without a database connection."""
    _configure(url=database_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    url = database_url()
    logger.info(f"Migrating {make_url(url).render_as_string(hide_password=True)}")
    engine = create_engine(url, poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            _configure(connection=connection, render_as_batch=connection.dialect.name == 'sqlite')
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
