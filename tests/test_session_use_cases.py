"""Tests for the session lifecycle use cases."""
from uuid import uuid4

import pytest

from gymbo.core.exceptions import (
    ActiveSessionExistsError,
    ExerciseNotFoundError,
    InvalidOperationError,
    PersistenceError,
    SessionNotFoundError,
    SetNotFoundError,
    WorkoutNotFoundError,
)
from gymbo.models.enums import SessionState
from gymbo.services import (
    CompleteSetUseCase,
    EndSessionUseCase,
    PauseSessionUseCase,
    QuickWorkoutTemplateProvider,
    ResumeSessionUseCase,
    StartSessionUseCase,
)
from gymbo.services.workout_templates import QUICK_WORKOUT_NAME
from tests.factories import T0, build_session


@pytest.fixture
def start_use_case(memory_repository, template_provider, clock):
    return StartSessionUseCase(memory_repository, template_provider, clock=clock)


@pytest.fixture
def complete_use_case(memory_repository, clock):
    return CompleteSetUseCase(memory_repository, clock=clock)


@pytest.fixture
def end_use_case(memory_repository, clock):
    return EndSessionUseCase(memory_repository, clock=clock)


@pytest.fixture
def pause_use_case(memory_repository, clock):
    return PauseSessionUseCase(memory_repository, clock=clock)


@pytest.fixture
def resume_use_case(memory_repository, clock):
    return ResumeSessionUseCase(memory_repository, clock=clock)


class TestStartSession:
    """Tests for StartSessionUseCase."""

    @pytest.mark.asyncio
    async def test_builds_active_session_from_template(
        self, start_use_case, memory_repository, push_day_template
    ):
        session = await start_use_case.execute(push_day_template.id)

        assert session.state == SessionState.ACTIVE
        assert session.workout_id == push_day_template.id
        assert session.workout_name == "Push Day"
        assert session.start_date == T0
        assert session.end_date is None
        assert session.total_sets == 9
        assert session.completed_sets == 0
        assert [e.order_index for e in session.exercises] == [0, 1, 2]
        assert [e.rest_time_to_next for e in session.exercises] == [90, 90, 60]
        assert session.exercises[1].notes == "Focus on form"
        assert await memory_repository.fetch(session.id) == session

    @pytest.mark.asyncio
    async def test_generates_fresh_ids(self, start_use_case, push_day_template, memory_repository):
        first = await start_use_case.execute(push_day_template.id)
        await memory_repository.delete(first.id)
        second = await start_use_case.execute(push_day_template.id)

        first_ids = {s.id for e in first.exercises for s in e.sets}
        second_ids = {s.id for e in second.exercises for s in e.sets}
        assert len(first_ids) == 9
        assert first_ids.isdisjoint(second_ids)
        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_rejects_when_session_is_active(
        self, start_use_case, memory_repository, push_day_template, leg_day_template
    ):
        active = await start_use_case.execute(push_day_template.id)

        with pytest.raises(ActiveSessionExistsError) as exc_info:
            await start_use_case.execute(leg_day_template.id)

        assert exc_info.value.session_id == active.id
        assert [s.id for s in await memory_repository.fetch_recent_sessions(10)] == [active.id]

    @pytest.mark.asyncio
    async def test_paused_session_does_not_block_start(
        self, start_use_case, pause_use_case, push_day_template, leg_day_template
    ):
        paused = await start_use_case.execute(push_day_template.id)
        await pause_use_case.execute(paused.id)

        session = await start_use_case.execute(leg_day_template.id)

        assert session.workout_name == "Leg Day"

    @pytest.mark.asyncio
    async def test_can_start_after_end(self, start_use_case, end_use_case, push_day_template):
        first = await start_use_case.execute(push_day_template.id)
        await end_use_case.execute(first.id)

        second = await start_use_case.execute(push_day_template.id)

        assert second.id != first.id
        assert second.is_active

    @pytest.mark.asyncio
    async def test_unknown_workout(self, start_use_case, memory_repository):
        with pytest.raises(WorkoutNotFoundError):
            await start_use_case.execute(uuid4())

        assert await memory_repository.fetch_active_session() is None

    @pytest.mark.asyncio
    async def test_quick_workout_accepts_any_id(self, memory_repository, clock):
        use_case = StartSessionUseCase(memory_repository, QuickWorkoutTemplateProvider(), clock=clock)

        session = await use_case.execute(uuid4())

        assert session.workout_name == QUICK_WORKOUT_NAME
        assert [e.total_sets for e in session.exercises] == [3, 3, 3]
        assert session.exercises[0].sets[0].weight == 100

    @pytest.mark.asyncio
    async def test_save_failure_propagates(self, start_use_case, memory_repository, push_day_template):
        error = PersistenceError("save", RuntimeError("disk full"))
        memory_repository.should_fail = True
        memory_repository.failing_operations = {"save"}
        memory_repository.error_to_raise = error

        with pytest.raises(PersistenceError) as exc_info:
            await start_use_case.execute(push_day_template.id)

        assert exc_info.value is error


class TestCompleteSet:
    """Tests for CompleteSetUseCase."""

    @pytest.mark.asyncio
    async def test_marks_set_completed_with_clock_time(self, complete_use_case, memory_repository, clock):
        session = build_session()
        await memory_repository.save(session)
        exercise = session.exercises[1]
        clock.advance(120)

        await complete_use_case.execute(session.id, exercise.id, exercise.sets[2].id)

        stored = await memory_repository.fetch(session.id)
        completed = stored.exercises[1].sets[2]
        assert completed.completed
        assert completed.completed_at == clock()
        assert stored.completed_sets == 1

    @pytest.mark.asyncio
    async def test_is_idempotent(self, complete_use_case, memory_repository, clock):
        session = build_session()
        await memory_repository.save(session)
        exercise = session.exercises[0]
        set_id = exercise.sets[0].id

        await complete_use_case.execute(session.id, exercise.id, set_id)
        clock.advance(30)
        await complete_use_case.execute(session.id, exercise.id, set_id)

        stored = await memory_repository.fetch(session.id)
        assert stored.completed_sets == 1
        assert stored.exercises[0].sets[0].completed_at == clock()

    @pytest.mark.asyncio
    async def test_unknown_session(self, complete_use_case):
        with pytest.raises(SessionNotFoundError):
            await complete_use_case.execute(uuid4(), uuid4(), uuid4())

    @pytest.mark.asyncio
    async def test_unknown_exercise(self, complete_use_case, memory_repository):
        session = build_session()
        await memory_repository.save(session)

        with pytest.raises(ExerciseNotFoundError):
            await complete_use_case.execute(session.id, uuid4(), session.exercises[0].sets[0].id)

    @pytest.mark.asyncio
    async def test_unknown_set(self, complete_use_case, memory_repository):
        session = build_session()
        await memory_repository.save(session)

        with pytest.raises(SetNotFoundError):
            await complete_use_case.execute(session.id, session.exercises[0].id, uuid4())

    @pytest.mark.asyncio
    async def test_update_failure_propagates(self, complete_use_case, memory_repository):
        session = build_session()
        await memory_repository.save(session)
        error = PersistenceError("update", RuntimeError("locked"))
        memory_repository.should_fail = True
        memory_repository.failing_operations = {"update"}
        memory_repository.error_to_raise = error

        with pytest.raises(PersistenceError) as exc_info:
            await complete_use_case.execute(
                session.id, session.exercises[0].id, session.exercises[0].sets[0].id
            )

        assert exc_info.value is error
        assert (await memory_repository.fetch(session.id)).completed_sets == 0


class TestEndSession:
    """Tests for EndSessionUseCase."""

    @pytest.mark.asyncio
    async def test_ends_active_session(self, end_use_case, memory_repository, clock):
        session = build_session()
        session.exercises[0].sets[0].mark_completed(T0)
        await memory_repository.save(session)
        clock.advance(1800)

        ended = await end_use_case.execute(session.id)

        assert ended.state == SessionState.COMPLETED
        assert ended.end_date == clock()
        assert ended.duration() == 1800
        stored = await memory_repository.fetch(session.id)
        assert stored == ended
        assert stored.completed_sets == 1
        assert not stored.exercises[2].sets[2].completed

    @pytest.mark.asyncio
    async def test_ends_paused_session(self, end_use_case, memory_repository):
        session = build_session(state=SessionState.PAUSED)
        await memory_repository.save(session)

        ended = await end_use_case.execute(session.id)

        assert ended.state == SessionState.COMPLETED

    @pytest.mark.asyncio
    async def test_cannot_end_completed_session(self, end_use_case, memory_repository, clock):
        session = build_session(state=SessionState.COMPLETED)
        await memory_repository.save(session)
        clock.advance(7200)

        with pytest.raises(InvalidOperationError):
            await end_use_case.execute(session.id)

        assert (await memory_repository.fetch(session.id)).end_date == session.end_date

    @pytest.mark.asyncio
    async def test_unknown_session(self, end_use_case):
        with pytest.raises(SessionNotFoundError):
            await end_use_case.execute(uuid4())


class TestPauseResume:
    """Tests for PauseSessionUseCase and ResumeSessionUseCase."""

    @pytest.mark.asyncio
    async def test_pause_then_resume(self, pause_use_case, resume_use_case, memory_repository):
        session = build_session()
        await memory_repository.save(session)

        await pause_use_case.execute(session.id)
        assert (await memory_repository.fetch(session.id)).state == SessionState.PAUSED
        assert await memory_repository.fetch_active_session() is None

        await resume_use_case.execute(session.id)
        assert (await memory_repository.fetch(session.id)).state == SessionState.ACTIVE

    @pytest.mark.asyncio
    async def test_pause_requires_active(self, pause_use_case, memory_repository):
        session = build_session(state=SessionState.PAUSED)
        await memory_repository.save(session)

        with pytest.raises(InvalidOperationError) as exc_info:
            await pause_use_case.execute(session.id)

        assert exc_info.value.details["state"] == "paused"

    @pytest.mark.asyncio
    async def test_resume_requires_paused(self, resume_use_case, memory_repository):
        session = build_session()
        await memory_repository.save(session)

        with pytest.raises(InvalidOperationError):
            await resume_use_case.execute(session.id)

    @pytest.mark.asyncio
    async def test_resume_refused_while_another_session_is_active(
        self, resume_use_case, memory_repository
    ):
        paused = build_session(state=SessionState.PAUSED)
        active = build_session()
        await memory_repository.save(paused)
        await memory_repository.save(active)

        with pytest.raises(ActiveSessionExistsError) as exc_info:
            await resume_use_case.execute(paused.id)

        assert exc_info.value.session_id == active.id
        assert (await memory_repository.fetch(paused.id)).state == SessionState.PAUSED

    @pytest.mark.asyncio
    async def test_unknown_session(self, pause_use_case, resume_use_case):
        with pytest.raises(SessionNotFoundError):
            await pause_use_case.execute(uuid4())
        with pytest.raises(SessionNotFoundError):
            await resume_use_case.execute(uuid4())


class TestDurableLifecycle:
    """A full session lifecycle on the SQLAlchemy repository."""

    @pytest.mark.asyncio
    async def test_start_complete_pause_resume_end(self, sql_repository, template_provider, push_day_template, clock):
        start = StartSessionUseCase(sql_repository, template_provider, clock=clock)
        complete = CompleteSetUseCase(sql_repository, clock=clock)
        pause = PauseSessionUseCase(sql_repository, clock=clock)
        resume = ResumeSessionUseCase(sql_repository, clock=clock)
        end = EndSessionUseCase(sql_repository, clock=clock)

        session = await start.execute(push_day_template.id)
        first = session.exercises[0]
        clock.advance(60)
        await complete.execute(session.id, first.id, first.sets[0].id)
        await pause.execute(session.id)
        await resume.execute(session.id)
        clock.advance(60)
        ended = await end.execute(session.id)

        stored = await sql_repository.fetch(session.id)
        assert stored == ended
        assert stored.state == SessionState.COMPLETED
        assert stored.completed_sets == 1
        assert stored.exercises[0].sets[0].completed_at == T0.replace(minute=1)
        assert stored.duration() == 120
        assert await sql_repository.fetch_active_session() is None
