"""
Database connection management for Lebaref CRM.
Handles SQLAlchemy engine creation, session management, and connection verification.
"""

import os
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import QueuePool, StaticPool

from config import normalize_database_url

logger = logging.getLogger(__name__)

# SQLAlchemy Base for model declarations
Base = declarative_base()

# Engine and SessionLocal are initialized by init_engine()
engine = None
SessionLocal = None


def _engine_options(url, echo=False, pool_size=5, max_overflow=10):
    """Build create_engine keyword arguments for the given database URL."""
    if url.startswith('sqlite'):
        options = {
            'echo': echo,
            'connect_args': {'check_same_thread': False},
        }
        # In-memory databases must share one connection across the app
        if url in ('sqlite://', 'sqlite:///:memory:'):
            options['poolclass'] = StaticPool
        return options

    return {
        'poolclass': QueuePool,
        'pool_size': pool_size,
        'max_overflow': max_overflow,
        'pool_pre_ping': True,  # Verify connections before using
        'pool_recycle': 300,    # Recycle connections after 5 minutes
        'echo': echo,
    }


def init_engine(database_url=None, echo=False, pool_size=5, max_overflow=10):
    """
    Create the engine and session factory for the given URL.

    Replaces any previously initialized engine, so each app instance
    (and each test) gets its own database.
    """
    global engine, SessionLocal

    url = normalize_database_url(database_url or os.environ.get('DATABASE_URL'))
    if not url:
        raise RuntimeError(
            "DATABASE_URL not configured. "
            "Please set the DATABASE_URL environment variable."
        )

    if engine is not None:
        engine.dispose()

    try:
        engine = create_engine(url, **_engine_options(url, echo, pool_size, max_overflow))
    except Exception as e:
        logger.error(f"Failed to create database engine: {e}")
        raise RuntimeError(f"Failed to connect to database: {e}")

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    logger.info(f"Database engine created for {engine.url.get_backend_name()}")
    return engine


def get_engine():
    """Get the SQLAlchemy engine, creating it from DATABASE_URL if needed."""
    if engine is None:
        return init_engine()
    return engine


def get_session_factory():
    """Get or create the session factory."""
    if SessionLocal is None:
        get_engine()
    return SessionLocal


@contextmanager
def get_db_session():
    """
    Context manager for getting a database session.
    Commits on success and rolls back when the block raises.

    Example:
        with get_db_session() as db:
            clients = db.query(Client).all()
    """
    session_factory = get_session_factory()
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_db_connection():
    """
    Verify that the database connection is working.
    Returns True if connection is successful, raises exception otherwise.
    """
    try:
        eng = get_engine()
        with eng.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        raise RuntimeError(f"Cannot connect to database: {e}")


def init_db():
    """
    Create all tables that do not exist yet.
    Production deployments run Alembic migrations instead.
    """
    # Import models to ensure they're registered with Base
    from database import models  # noqa: F401

    eng = get_engine()
    Base.metadata.create_all(bind=eng)
    logger.info("Database tables created/verified")


def drop_db():
    """Drop all tables. Used by the test suite."""
    from database import models  # noqa: F401

    Base.metadata.drop_all(bind=get_engine())
