"""Database connection and session management."""

import logging
import os
from typing import Generator

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

load_dotenv()

# Get database URL from environment or use SQLite default
DATABASE_URL = os.getenv("DATABASE_URL") or "sqlite:///./roomledger.db"


def create_db_engine(database_url: str) -> Engine:
    """Create an engine (SQLite uses StaticPool for simplicity in dev/test)."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, pool_pre_ping=True)


engine = create_db_engine(DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def configure_database(database_url: str) -> None:
    """Rebind the module engine and session factory to another database.

    Entry points call this with AppConfig.database_url; get_db and init_db
    pick up the new engine on their next call.
    """
    global DATABASE_URL, engine, SessionLocal

    new_engine = create_db_engine(database_url)
    DATABASE_URL = database_url
    engine = new_engine
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    logger.info(f"Database configured: {engine.url.render_as_string(hide_password=True)}")


def init_db() -> None:
    """Create all tables that do not exist yet."""
    from roomledger.models import Base

    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "engine",
    "SessionLocal",
    "configure_database",
    "create_db_engine",
    "init_db",
    "get_db",
]
