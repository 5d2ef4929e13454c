from uuid import UUID

from gymbo.core.clock import Clock, utcnow
from gymbo.core.exceptions import SessionNotFoundError
from gymbo.repositories.base import SessionRepository
from gymbo.schemas.session import WorkoutSession


class BaseSessionUseCase:
    def __init__(self, session_repository: SessionRepository, clock: Clock = utcnow):
        self._repository = session_repository
        self._clock = clock

    async def _get_session_or_raise(self, session_id: UUID) -> WorkoutSession:
        session = await self._repository.fetch(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session
