"""Database package."""
from gymbo.db.database import (
    Base,
    close_engine,
    create_engine,
    create_session_maker,
    init_db,
)

__all__ = [
    "Base",
    "close_engine",
    "create_engine",
    "create_session_maker",
    "init_db",
]
