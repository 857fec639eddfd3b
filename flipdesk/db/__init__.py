"""
Database configuration and models.
"""

from flipdesk.db.database import engine, SessionLocal, create_db_engine, get_db, init_db
from flipdesk.db.models import Base

__all__ = ["engine", "SessionLocal", "create_db_engine", "get_db", "init_db", "Base"]
