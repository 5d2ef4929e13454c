"""Session repository contract."""
from abc import ABC, abstractmethod
from uuid import UUID

from gymbo.schemas.session import WorkoutSession


class SessionRepository(ABC):
    """Persistence operations for workout sessions.

    Every read returns exercises and sets sorted by `order_index`. Store
    failures surface as `PersistenceError`; a missing session on `fetch` is
    `None`, not an error.
    """

    @abstractmethod
    async def save(self, session: WorkoutSession) -> None:
        """Insert a brand-new session.

        Raises:
            ValidationError: the session breaks a lifecycle or ordering rule
            PersistenceError: a session with this id is already stored
        """

    @abstractmethod
    async def update(self, session: WorkoutSession) -> None:
        """Merge `session` into the stored record with the same id.

        Raises:
            ValidationError: the session breaks a lifecycle or ordering rule
            SessionNotFoundError: no stored session has this id
        """

    @abstractmethod
    async def fetch(self, id: UUID) -> WorkoutSession | None:
        """Return the session, or None if no record has this id."""

    @abstractmethod
    async def fetch_active_session(self) -> WorkoutSession | None:
        """Return the session in the active state, if any.

        Raises:
            MultipleActiveSessionsError: more than one active session is stored
        """

    @abstractmethod
    async def fetch_sessions(self, workout_id: UUID) -> list[WorkoutSession]:
        """All sessions of a workout template, newest start first."""

    @abstractmethod
    async def fetch_recent_sessions(self, limit: int) -> list[WorkoutSession]:
        """Up to `limit` sessions, newest start first."""

    @abstractmethod
    async def delete(self, id: UUID) -> None:
        """Remove one session with its exercises and sets.

        Raises:
            SessionNotFoundError: no stored session has this id
        """

    @abstractmethod
    async def delete_all(self) -> int:
        """Remove every session. Returns the number of sessions removed."""
