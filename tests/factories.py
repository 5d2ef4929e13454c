"""Test data builders and a controllable clock."""
from datetime import datetime, timedelta
from uuid import UUID, uuid4

from gymbo.models.enums import SessionState
from gymbo.schemas.session import SessionExercise, SessionSet, WorkoutSession

T0 = datetime(2025, 10, 22, 18, 0, 0)


class FakeClock:
    """Deterministic clock; call it to read, `advance` to move forward."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


def build_session(
    workout_id: UUID | None = None,
    state: SessionState = SessionState.ACTIVE,
    start_date: datetime = T0,
    exercise_count: int = 3,
    sets_per_exercise: int = 3,
) -> WorkoutSession:
    exercises = [
        SessionExercise(
            exercise_id=uuid4(),
            sets=[
                SessionSet(weight=100.0 - 20 * e, reps=8 + 2 * e, order_index=s)
                for s in range(sets_per_exercise)
            ],
            rest_time_to_next=90.0,
            order_index=e,
        )
        for e in range(exercise_count)
    ]
    return WorkoutSession(
        workout_id=workout_id or uuid4(),
        start_date=start_date,
        end_date=start_date + timedelta(hours=1) if state == SessionState.COMPLETED else None,
        exercises=exercises,
        state=state,
        workout_name="Push Day",
    )
