"""Shared fixtures for the session core tests."""
from uuid import uuid4

import pytest
import pytest_asyncio

from gymbo.db.database import create_engine, create_session_maker, init_db
from gymbo.repositories.in_memory_session_repository import InMemorySessionRepository
from gymbo.repositories.session_repository import SqlAlchemySessionRepository
from gymbo.services.workout_templates import (
    StaticWorkoutTemplateProvider,
    TemplateExercise,
    TemplateSet,
    WorkoutTemplate,
)

from tests.factories import FakeClock, build_session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_factory():
    """Factory for sessions with three exercises of three sets by default."""
    return build_session


@pytest.fixture
def memory_repository():
    return InMemorySessionRepository()


async def _sqlite_engine(path):
    engine = create_engine(f"sqlite+aiosqlite:///{path}", echo=False)
    await init_db(engine)
    return engine


@pytest_asyncio.fixture
async def sql_engine(tmp_path):
    engine = await _sqlite_engine(tmp_path / "gymbo.db")
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def sql_repository(sql_engine):
    return SqlAlchemySessionRepository(create_session_maker(sql_engine))


@pytest_asyncio.fixture(params=["memory", "sqlalchemy"])
async def repository(request, tmp_path):
    """Every repository implementation, for contract tests."""
    if request.param == "memory":
        yield InMemorySessionRepository()
        return
    engine = await _sqlite_engine(tmp_path / "contract.db")
    yield SqlAlchemySessionRepository(create_session_maker(engine))
    await engine.dispose()


@pytest.fixture
def push_day_template():
    return WorkoutTemplate(
        id=uuid4(),
        name="Push Day",
        exercises=[
            TemplateExercise(
                exercise_id=uuid4(),
                sets=[TemplateSet(weight=100, reps=8) for _ in range(3)],
                rest_time_to_next=90,
            ),
            TemplateExercise(
                exercise_id=uuid4(),
                sets=[TemplateSet(weight=80, reps=10) for _ in range(3)],
                notes="Focus on form",
                rest_time_to_next=90,
            ),
            TemplateExercise(
                exercise_id=uuid4(),
                sets=[TemplateSet(weight=60, reps=12) for _ in range(3)],
                rest_time_to_next=60,
            ),
        ],
    )


@pytest.fixture
def leg_day_template():
    return WorkoutTemplate(
        id=uuid4(),
        name="Leg Day",
        exercises=[
            TemplateExercise(
                exercise_id=uuid4(),
                sets=[TemplateSet(weight=140, reps=5) for _ in range(2)],
            ),
        ],
    )


@pytest.fixture
def template_provider(push_day_template, leg_day_template):
    return StaticWorkoutTemplateProvider([push_day_template, leg_day_template])
