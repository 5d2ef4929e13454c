"""Lifecycle transitions of an existing session: end, pause and resume."""
from uuid import UUID

from gymbo.core.exceptions import ActiveSessionExistsError, InvalidOperationError
from gymbo.core.logging import get_logger
from gymbo.models.enums import SessionState
from gymbo.schemas.session import WorkoutSession
from gymbo.services.base import BaseSessionUseCase

logger = get_logger(__name__)


def _invalid_transition(action: str, state: SessionState, required: str) -> InvalidOperationError:
    return InvalidOperationError(
        f"Cannot {action} session in state: {state.value}. Session must be {required}.",
        {"state": state.value, "action": action},
    )


class EndSessionUseCase(BaseSessionUseCase):
    """Complete an active or paused session. Unfinished sets stay unfinished."""

    async def execute(self, session_id: UUID) -> WorkoutSession:
        session = await self._get_session_or_raise(session_id)

        if session.state not in (SessionState.ACTIVE, SessionState.PAUSED):
            raise _invalid_transition("end", session.state, "active or paused")

        session.end_date = self._clock()
        session.state = SessionState.COMPLETED
        await self._repository.update(session)

        logger.info(
            "session_ended",
            session_id=str(session_id),
            completed_sets=session.completed_sets,
            total_sets=session.total_sets,
            total_volume=session.total_volume,
            duration_seconds=int(session.duration()),
        )
        return session


class PauseSessionUseCase(BaseSessionUseCase):
    async def execute(self, session_id: UUID) -> None:
        session = await self._get_session_or_raise(session_id)

        if session.state != SessionState.ACTIVE:
            raise _invalid_transition("pause", session.state, "active")

        session.state = SessionState.PAUSED
        await self._repository.update(session)
        logger.info("session_paused", session_id=str(session_id))


class ResumeSessionUseCase(BaseSessionUseCase):
    """Reactivate a paused session.

    Refused while a different session is active, since paused sessions do
    not block new starts.
    """

    async def execute(self, session_id: UUID) -> None:
        session = await self._get_session_or_raise(session_id)

        if session.state != SessionState.PAUSED:
            raise _invalid_transition("resume", session.state, "paused")

        active = await self._repository.fetch_active_session()
        if active is not None and active.id != session_id:
            raise ActiveSessionExistsError(active.id)

        session.state = SessionState.ACTIVE
        await self._repository.update(session)
        logger.info("session_resumed", session_id=str(session_id))
