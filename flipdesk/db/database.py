"""
Database connection and session management.
"""

from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool

from flipdesk.config import get_settings
from flipdesk.db.models import Base

settings = get_settings()


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """
    Engine for a database URL.

    Heroku-style "postgres://" and driverless "postgresql://" URLs are
    pinned to psycopg2. Postgres connections are not pooled (pgbouncer
    does that); SQLite connections may be shared across threads.
    """
    for prefix in ("postgres://", "postgresql://"):
        if database_url.startswith(prefix):
            database_url = "postgresql+psycopg2://" + database_url[len(prefix):]
            break

    if database_url.startswith("postgresql"):
        kwargs.setdefault("poolclass", NullPool)
    elif database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})

    return create_engine(database_url, **kwargs)


engine = create_db_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Optional[Engine] = None):
    """Create any missing tables."""
    Base.metadata.create_all(bind=bind or engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
