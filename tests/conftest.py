"""
Pytest fixtures for testing
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from studiodesk.auth import hash_password
from studiodesk.domain.user import UserRole
from studiodesk.infrastructure.db import models  # noqa: F401  (registers tables)
from studiodesk.infrastructure.db.models import Firm, User
from studiodesk.infrastructure.db.session import Base, enable_sqlite_savepoints

PASSWORD = "password123"


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with SAVEPOINT support and foreign keys on"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="session")
def password_hash():
    """Hashing is slow on purpose; hash the shared test password once"""
    return hash_password(PASSWORD)


@pytest.fixture
def make_firm(db_session):
    def _make(name="Aperture Studios", pin="1234", is_active=True) -> Firm:
        firm = Firm(name=name, pin=pin, is_active=is_active)
        db_session.add(firm)
        db_session.commit()
        return firm
    return _make


@pytest.fixture
def make_user(db_session, password_hash):
    def _make(firm_id, email, role=UserRole.PHOTOGRAPHER, first_name="Rahul",
              last_name="Kumar", is_active=True) -> User:
        user = User(
            firm_id=firm_id,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            phone="9123456789",
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture
def firm(make_firm):
    return make_firm()


@pytest.fixture
def admin(firm, make_user):
    return make_user(
        firm.id, "sarah@aperturestudios.com", role=UserRole.ADMIN,
        first_name="Sarah", last_name="Johnson",
    )


@pytest.fixture
def photographer(firm, make_user):
    return make_user(firm.id, "rahul@aperturestudios.com")


@pytest.fixture
def other_firm(make_firm):
    return make_firm(name="Golden Frame", pin="9999")


@pytest.fixture
def other_admin(other_firm, make_user):
    return make_user(
        other_firm.id, "owner@goldenframe.com", role=UserRole.ADMIN,
        first_name="Vikram", last_name="Rao",
    )
