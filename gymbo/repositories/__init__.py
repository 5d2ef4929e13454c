"""Repositories package."""
from gymbo.repositories.base import SessionRepository
from gymbo.repositories.in_memory_session_repository import InMemorySessionRepository
from gymbo.repositories.session_mapper import SessionMapper
from gymbo.repositories.session_repository import SqlAlchemySessionRepository

__all__ = [
    "SessionRepository",
    "InMemorySessionRepository",
    "SessionMapper",
    "SqlAlchemySessionRepository",
]
