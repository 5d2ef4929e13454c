from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from gymbo.core.exceptions import (
    MultipleActiveSessionsError,
    PersistenceError,
    SessionNotFoundError,
)
from gymbo.core.logging import get_logger
from gymbo.models.enums import SessionState
from gymbo.models.session import SessionExerciseRecord, WorkoutSessionRecord
from gymbo.repositories.base import SessionRepository
from gymbo.repositories.session_mapper import SessionMapper
from gymbo.schemas.session import WorkoutSession

logger = get_logger(__name__)


class SqlAlchemySessionRepository(SessionRepository):
    """Durable session repository on an async SQLAlchemy session factory.

    Each operation runs in its own session and transaction.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], mapper: SessionMapper | None = None):
        self._session_maker = session_maker
        self._mapper = mapper or SessionMapper()

    @asynccontextmanager
    async def _unit_of_work(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_maker() as db:
                async with db.begin():
                    yield db
        except SQLAlchemyError as e:
            logger.error("session_repository_failure", operation=operation, error=str(e))
            raise PersistenceError(operation, e) from e

    @staticmethod
    def _with_children(query):
        return query.options(
            selectinload(WorkoutSessionRecord.exercises).selectinload(SessionExerciseRecord.sets)
        )

    async def _get_record(self, db: AsyncSession, id: UUID) -> WorkoutSessionRecord | None:
        result = await db.execute(
            self._with_children(select(WorkoutSessionRecord)).where(WorkoutSessionRecord.id == id)
        )
        return result.scalar_one_or_none()

    async def save(self, session: WorkoutSession) -> None:
        session.check_consistency()
        async with self._unit_of_work("save") as db:
            db.add(self._mapper.to_record(session))
            await db.flush()
        logger.debug("session_saved", session_id=str(session.id))

    async def update(self, session: WorkoutSession) -> None:
        session.check_consistency()
        async with self._unit_of_work("update") as db:
            record = await self._get_record(db, session.id)
            if record is None:
                raise SessionNotFoundError(session.id)
            self._mapper.update_record(record, session)
            await db.flush()
        logger.debug("session_updated", session_id=str(session.id), state=session.state.value)

    async def fetch(self, id: UUID) -> WorkoutSession | None:
        async with self._unit_of_work("fetch") as db:
            record = await self._get_record(db, id)
            return self._mapper.to_domain(record) if record else None

    async def fetch_active_session(self) -> WorkoutSession | None:
        async with self._unit_of_work("fetch") as db:
            result = await db.execute(
                self._with_children(select(WorkoutSessionRecord))
                .where(WorkoutSessionRecord.state == SessionState.ACTIVE.value)
            )
            records = list(result.scalars().all())

            if len(records) > 1:
                logger.error("multiple_active_sessions", session_ids=[str(r.id) for r in records])
                raise MultipleActiveSessionsError([r.id for r in records])

            return self._mapper.to_domain(records[0]) if records else None

    async def fetch_sessions(self, workout_id: UUID) -> list[WorkoutSession]:
        async with self._unit_of_work("fetch") as db:
            result = await db.execute(
                self._with_children(select(WorkoutSessionRecord))
                .where(WorkoutSessionRecord.workout_id == workout_id)
                .order_by(WorkoutSessionRecord.start_date.desc())
            )
            return self._mapper.to_domain_list(list(result.scalars().all()))

    async def fetch_recent_sessions(self, limit: int) -> list[WorkoutSession]:
        if limit <= 0:
            return []
        async with self._unit_of_work("fetch") as db:
            result = await db.execute(
                self._with_children(select(WorkoutSessionRecord))
                .order_by(WorkoutSessionRecord.start_date.desc())
                .limit(limit)
            )
            return self._mapper.to_domain_list(list(result.scalars().all()))

    async def delete(self, id: UUID) -> None:
        async with self._unit_of_work("delete") as db:
            record = await self._get_record(db, id)
            if record is None:
                raise SessionNotFoundError(id)
            await db.delete(record)
        logger.info("session_deleted", session_id=str(id))

    async def delete_all(self) -> int:
        async with self._unit_of_work("delete") as db:
            result = await db.execute(self._with_children(select(WorkoutSessionRecord)))
            records = list(result.scalars().all())
            for record in records:
                await db.delete(record)
        logger.info("sessions_deleted", count=len(records))
        return len(records)
