"""Dependency wiring for the session core.

Usage:
    container = await DependencyContainer.create()
    store = container.session_store
    await store.load_active_session()
    ...
    await container.aclose()
"""
from sqlalchemy.ext.asyncio import AsyncEngine

from gymbo.core.clock import Clock, utcnow
from gymbo.db.database import close_engine, create_engine, create_session_maker, init_db
from gymbo.repositories.base import SessionRepository
from gymbo.repositories.session_repository import SqlAlchemySessionRepository
from gymbo.services.complete_set import CompleteSetUseCase
from gymbo.services.end_session import (
    EndSessionUseCase,
    PauseSessionUseCase,
    ResumeSessionUseCase,
)
from gymbo.services.rest_timer import RestTimerStateManager
from gymbo.services.start_session import StartSessionUseCase
from gymbo.services.workout_templates import WorkoutTemplateProvider
from gymbo.stores.session_store import SessionStore


class DependencyContainer:
    def __init__(
        self,
        session_repository: SessionRepository,
        template_provider: WorkoutTemplateProvider | None = None,
        rest_timer: RestTimerStateManager | None = None,
        clock: Clock = utcnow,
        engine: AsyncEngine | None = None,
    ):
        self._repository = session_repository
        self._template_provider = template_provider
        self._rest_timer = rest_timer
        self._clock = clock
        self._engine = engine
        self._session_store: SessionStore | None = None

    @classmethod
    async def create(
        cls,
        database_url: str | None = None,
        template_provider: WorkoutTemplateProvider | None = None,
        rest_timer: RestTimerStateManager | None = None,
    ) -> "DependencyContainer":
        """Build a container backed by the durable repository."""
        engine = create_engine(database_url)
        await init_db(engine)
        repository = SqlAlchemySessionRepository(create_session_maker(engine))
        return cls(repository, template_provider=template_provider, rest_timer=rest_timer, engine=engine)

    # Repositories

    def make_session_repository(self) -> SessionRepository:
        return self._repository

    # Use cases

    def make_start_session_use_case(self) -> StartSessionUseCase:
        return StartSessionUseCase(self._repository, self._template_provider, clock=self._clock)

    def make_complete_set_use_case(self) -> CompleteSetUseCase:
        return CompleteSetUseCase(self._repository, clock=self._clock)

    def make_end_session_use_case(self) -> EndSessionUseCase:
        return EndSessionUseCase(self._repository, clock=self._clock)

    def make_pause_session_use_case(self) -> PauseSessionUseCase:
        return PauseSessionUseCase(self._repository, clock=self._clock)

    def make_resume_session_use_case(self) -> ResumeSessionUseCase:
        return ResumeSessionUseCase(self._repository, clock=self._clock)

    # Stores

    @property
    def session_store(self) -> SessionStore:
        """Shared SessionStore instance."""
        if self._session_store is None:
            self._session_store = SessionStore(
                start_session_use_case=self.make_start_session_use_case(),
                complete_set_use_case=self.make_complete_set_use_case(),
                end_session_use_case=self.make_end_session_use_case(),
                pause_session_use_case=self.make_pause_session_use_case(),
                resume_session_use_case=self.make_resume_session_use_case(),
                session_repository=self._repository,
                rest_timer=self._rest_timer,
                clock=self._clock,
            )
        return self._session_store

    async def aclose(self) -> None:
        if self._session_store is not None:
            await self._session_store.aclose()
        if self._rest_timer is not None:
            await self._rest_timer.aclose()
        if self._engine is not None:
            await close_engine(self._engine)
