"""Database models for TaleForge.

SQLAlchemy models for:
- Users (credential store)
- Stories (owner-scoped story store)

All models use async SQLAlchemy (asyncpg for PostgreSQL, aiosqlite for SQLite).
"""

from .database import (
    Base,
    close_db,
    create_tables,
    get_engine,
    get_session,
    init_db,
    ping,
)
from .story import Story
from .user import User

__all__ = [
    # Database
    "Base",
    "init_db",
    "create_tables",
    "get_session",
    "get_engine",
    "ping",
    "close_db",
    # Models
    "User",
    "Story",
]
