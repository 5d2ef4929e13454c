"""Dictionary-backed session repository for tests and previews."""
from uuid import UUID

from gymbo.core.exceptions import (
    MultipleActiveSessionsError,
    PersistenceError,
    SessionNotFoundError,
)
from gymbo.models.enums import SessionState
from gymbo.repositories.base import SessionRepository
from gymbo.schemas.session import WorkoutSession


class InMemorySessionRepository(SessionRepository):
    """Stores deep copies keyed by session id.

    Set `should_fail` to make operations raise `error_to_raise`; restrict the
    failure to some operations with `failing_operations`
    (e.g. ``{"update"}``).
    """

    def __init__(self):
        self._sessions: dict[UUID, WorkoutSession] = {}
        self.should_fail = False
        self.error_to_raise: Exception = PersistenceError("fetch", RuntimeError("simulated failure"))
        self.failing_operations: set[str] | None = None

    def _check_failure(self, operation: str) -> None:
        if not self.should_fail:
            return
        if self.failing_operations is None or operation in self.failing_operations:
            raise self.error_to_raise

    @staticmethod
    def _detached(session: WorkoutSession) -> WorkoutSession:
        return session.sorted_by_order_index()

    def _newest_first(self) -> list[WorkoutSession]:
        return sorted(self._sessions.values(), key=lambda s: s.start_date, reverse=True)

    async def save(self, session: WorkoutSession) -> None:
        self._check_failure("save")
        session.check_consistency()
        if session.id in self._sessions:
            raise PersistenceError("save", ValueError(f"Session {session.id} already exists"))
        self._sessions[session.id] = session.model_copy(deep=True)

    async def update(self, session: WorkoutSession) -> None:
        self._check_failure("update")
        session.check_consistency()
        if session.id not in self._sessions:
            raise SessionNotFoundError(session.id)
        self._sessions[session.id] = session.model_copy(deep=True)

    async def fetch(self, id: UUID) -> WorkoutSession | None:
        self._check_failure("fetch")
        session = self._sessions.get(id)
        return self._detached(session) if session is not None else None

    async def fetch_active_session(self) -> WorkoutSession | None:
        self._check_failure("fetch")
        active = [s for s in self._sessions.values() if s.state == SessionState.ACTIVE]
        if len(active) > 1:
            raise MultipleActiveSessionsError([s.id for s in active])
        return self._detached(active[0]) if active else None

    async def fetch_sessions(self, workout_id: UUID) -> list[WorkoutSession]:
        self._check_failure("fetch")
        return [self._detached(s) for s in self._newest_first() if s.workout_id == workout_id]

    async def fetch_recent_sessions(self, limit: int) -> list[WorkoutSession]:
        self._check_failure("fetch")
        if limit <= 0:
            return []
        return [self._detached(s) for s in self._newest_first()[:limit]]

    async def delete(self, id: UUID) -> None:
        self._check_failure("delete")
        if self._sessions.pop(id, None) is None:
            raise SessionNotFoundError(id)

    async def delete_all(self) -> int:
        self._check_failure("delete")
        count = len(self._sessions)
        self._sessions.clear()
        return count

    def reset(self) -> None:
        """Drop all sessions and clear failure injection."""
        self._sessions.clear()
        self.should_fail = False
        self.failing_operations = None
