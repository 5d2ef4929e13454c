from uuid import UUID

from gymbo.core.clock import Clock, utcnow
from gymbo.core.exceptions import ActiveSessionExistsError, WorkoutNotFoundError
from gymbo.core.logging import get_logger
from gymbo.models.enums import SessionState
from gymbo.repositories.base import SessionRepository
from gymbo.schemas.session import WorkoutSession
from gymbo.services.base import BaseSessionUseCase
from gymbo.services.workout_templates import (
    QuickWorkoutTemplateProvider,
    WorkoutTemplateProvider,
)

logger = get_logger(__name__)


class StartSessionUseCase(BaseSessionUseCase):
    """Create and persist a new active session from a workout template.

    Only one session may be active at a time. Paused sessions do not block
    a new start.
    """

    def __init__(
        self,
        session_repository: SessionRepository,
        template_provider: WorkoutTemplateProvider | None = None,
        clock: Clock = utcnow,
    ):
        super().__init__(session_repository, clock)
        self._templates = template_provider or QuickWorkoutTemplateProvider()

    async def execute(self, workout_id: UUID) -> WorkoutSession:
        existing = await self._repository.fetch_active_session()
        if existing is not None:
            logger.warning(
                "start_session_rejected",
                workout_id=str(workout_id),
                active_session_id=str(existing.id),
            )
            raise ActiveSessionExistsError(existing.id)

        template = await self._templates.get_template(workout_id)
        if template is None:
            raise WorkoutNotFoundError(workout_id)

        session = WorkoutSession(
            workout_id=workout_id,
            start_date=self._clock(),
            exercises=template.build_session_exercises(),
            state=SessionState.ACTIVE,
            workout_name=template.name,
        )
        await self._repository.save(session)

        logger.info(
            "session_started",
            session_id=str(session.id),
            workout_id=str(workout_id),
            exercises=len(session.exercises),
            sets=session.total_sets,
        )
        return session
