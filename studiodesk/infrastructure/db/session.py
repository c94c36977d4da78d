"""
Database session management (SQLAlchemy)

The storage backend is picked once from settings when the engine is built:
  - database: PostgreSQL (or any SQLAlchemy URL) from DATABASE_URL
  - memory:   one shared in-memory SQLite connection, schema created on startup
"""
import logging

import psycopg
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from studiodesk.application.errors import StorageError
from studiodesk.config import get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for all ORM models
    """
    pass


# Singleton engine and session factory
_engine = None
_SessionLocal = None


def enable_sqlite_savepoints(engine: Engine) -> None:
    """
    Let SQLAlchemy own BEGIN on pysqlite connections.

    pysqlite defers BEGIN on its own, which breaks SAVEPOINT handling
    (Session.begin_nested) used by the activity logger.
    """
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_memory_engine() -> Engine:
    """In-memory SQLite engine shared by every session of the process."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    return engine


def get_engine():
    """Get or create SQLAlchemy engine (singleton)"""
    global _engine
    if _engine is None:
        settings = get_settings()
        if settings.uses_memory_storage:
            _engine = create_memory_engine()
        else:
            _engine = create_engine(settings.get_sqlalchemy_url(), pool_pre_ping=True)
        logger.info("Storage backend: %s", settings.STORAGE_BACKEND)
    return _engine


def get_session_factory():
    """Get or create session factory (singleton)"""
    global _SessionLocal
    if _SessionLocal is None:
        engine = get_engine()
        _SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    return _SessionLocal


def init_storage() -> None:
    """
    Prepare the configured backend on startup.

    The memory backend has no migrations, so the schema is created here.
    The database backend is managed by Alembic and is left untouched.
    """
    settings = get_settings()
    if not settings.uses_memory_storage:
        return
    from studiodesk.infrastructure.db import models  # noqa: F401  (registers tables)
    Base.metadata.create_all(get_engine())


def get_db() -> Session:
    """
    FastAPI dependency - opens a session per request and always closes it

    Usage:
        @app.get("/api/clients")
        def list_clients(db: Session = Depends(get_db)):
            ...
    """
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> None:
    """
    Health check - verify the configured storage answers a trivial query

    Raises:
        StorageError: if the backend is unreachable
    """
    settings = get_settings()
    try:
        if settings.uses_memory_storage:
            with get_engine().connect() as conn:
                conn.execute(text("SELECT 1"))
            return
        with psycopg.connect(settings.DATABASE_URL, connect_timeout=3) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
    except (psycopg.Error, SQLAlchemyError) as exc:
        raise StorageError(f"Storage backend {settings.STORAGE_BACKEND} is unreachable") from exc
