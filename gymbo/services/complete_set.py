from uuid import UUID

from gymbo.core.exceptions import ExerciseNotFoundError, SetNotFoundError
from gymbo.core.logging import get_logger
from gymbo.services.base import BaseSessionUseCase

logger = get_logger(__name__)


class CompleteSetUseCase(BaseSessionUseCase):
    """Mark one set of a session as completed.

    Completing an already completed set overwrites its timestamp.
    """

    async def execute(self, session_id: UUID, exercise_id: UUID, set_id: UUID) -> None:
        session = await self._get_session_or_raise(session_id)

        exercise = session.find_exercise(exercise_id)
        if exercise is None:
            raise ExerciseNotFoundError(exercise_id)

        session_set = exercise.find_set(set_id)
        if session_set is None:
            raise SetNotFoundError(set_id)

        session_set.mark_completed(self._clock())
        await self._repository.update(session)

        logger.info(
            "set_completed",
            session_id=str(session_id),
            exercise_id=str(exercise_id),
            set_id=str(set_id),
            progress=round(session.progress, 3),
        )
