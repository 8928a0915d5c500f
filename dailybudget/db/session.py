"""Database session and engine management."""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from dailybudget.config import settings


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,  # Keep objects usable after commit
)


def create_tables() -> None:
    """Create the blob table when running without migrations (dev, SQLite)."""
    from dailybudget.db.base import Base
    from dailybudget.db import models  # noqa: F401  # Imported for side effects

    Base.metadata.create_all(bind=engine)
