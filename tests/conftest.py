"""Pytest configuration and shared fixtures."""

import os

# Set test environment BEFORE any imports from roomledger
# so the module-level engine and locale constants pick it up
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LOCALE"] = "en_IN"

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from roomledger.models import Base  # noqa: E402
from roomledger.services.store import LedgerStore  # noqa: E402


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Create test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def store(db_session):
    return LedgerStore(db_session)


@pytest.fixture
def june():
    return date(2024, 6, 1)


@pytest.fixture
def seeded(store, june):
    """Two rooms and three tenants: two active (one with mess) and one who left."""
    room_a = store.create_room("A-101", 8000)
    room_b = store.create_room("B-202", 6000)

    asha = store.create_tenant(
        "Asha Rao", "9876500001", room_a.id, date(2024, 1, 5), uses_mess=True, deposit_amount=5000
    )
    vikram = store.create_tenant(
        "Vikram Singh", "9876500002", room_b.id, date(2024, 2, 1), deposit_amount=4000
    )
    meera = store.create_tenant(
        "Meera Das", "9876500003", room_b.id, date(2023, 11, 1), uses_mess=True, deposit_amount=3000
    )
    store.mark_tenant_left(meera.id, date(2024, 6, 20))

    return {
        "rooms": {"a": room_a, "b": room_b},
        "tenants": {"asha": asha, "vikram": vikram, "meera": meera},
    }
