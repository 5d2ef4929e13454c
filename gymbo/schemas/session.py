"""Value records for a workout session and the exercises and sets it owns.

These are detached values: the session store and the use cases work on
copies and write them back through the repository explicitly.
"""
from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator

from gymbo.core.clock import utcnow
from gymbo.core.exceptions import ValidationError
from gymbo.models.enums import SessionState

JUST_COMPLETED_WINDOW_SECONDS = 5.0


def _format_kg(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value)} kg"
    return f"{value:.1f} kg"


def _check_unique_order(items, parent: str) -> None:
    seen = set()
    for item in items:
        if item.order_index in seen:
            raise ValidationError(
                "order_index",
                f"Duplicate order index {item.order_index} in {parent}",
                {"field": "order_index", "value": item.order_index, "parent": parent},
            )
        seen.add(item.order_index)


class SessionSet(BaseModel):
    """A single set (weight x reps) within an exercise."""
    id: UUID = Field(default_factory=uuid4)
    weight: float
    reps: int
    completed: bool = False
    completed_at: datetime | None = None
    order_index: int = 0

    @model_validator(mode="after")
    def validate_completion(self) -> "SessionSet":
        self.check_consistency()
        return self

    def check_consistency(self) -> None:
        """`completed_at` is present exactly when the set is completed."""
        if self.completed != (self.completed_at is not None):
            raise ValidationError(
                "completed_at",
                "completed_at must be set if and only if the set is completed",
                {"field": "completed_at", "completed": self.completed},
            )

    @property
    def volume(self) -> float:
        return self.weight * self.reps

    @property
    def is_valid(self) -> bool:
        return self.weight > 0 and self.reps > 0

    @property
    def formatted_weight(self) -> str:
        return _format_kg(self.weight)

    @property
    def formatted_reps(self) -> str:
        return "1 rep" if self.reps == 1 else f"{self.reps} reps"

    @property
    def formatted_volume(self) -> str:
        return f"{int(self.volume)} kg"

    def validate_values(self) -> None:
        """Raise ValidationError if weight or reps are not positive."""
        if self.weight <= 0:
            raise ValidationError(
                "weight",
                f"Invalid weight: {self.weight} kg. Weight must be greater than 0.",
                {"field": "weight", "value": self.weight},
            )
        if self.reps <= 0:
            raise ValidationError(
                "reps",
                f"Invalid reps: {self.reps}. Reps must be greater than 0.",
                {"field": "reps", "value": self.reps},
            )

    def was_just_completed(self, now: datetime | None = None) -> bool:
        if self.completed_at is None:
            return False
        elapsed = ((now or utcnow()) - self.completed_at).total_seconds()
        return elapsed < JUST_COMPLETED_WINDOW_SECONDS

    def mark_completed(self, now: datetime | None = None) -> None:
        self.completed = True
        self.completed_at = now or utcnow()

    def mark_incomplete(self) -> None:
        self.completed = False
        self.completed_at = None

    def toggle_completion(self, now: datetime | None = None) -> None:
        if self.completed:
            self.mark_incomplete()
        else:
            self.mark_completed(now)


class SessionExercise(BaseModel):
    """One movement's worth of sets inside a session.

    `exercise_id` points into the exercise catalog, which this package
    never mutates. `rest_time_to_next` is the rest hint in seconds applied
    after a set of this exercise is completed.
    """
    id: UUID = Field(default_factory=uuid4)
    exercise_id: UUID
    sets: list[SessionSet] = Field(default_factory=list)
    notes: str | None = None
    rest_time_to_next: float | None = None
    order_index: int = 0

    @model_validator(mode="after")
    def validate_set_order(self) -> "SessionExercise":
        _check_unique_order(self.sets, "exercise")
        return self

    def check_consistency(self) -> None:
        _check_unique_order(self.sets, "exercise")
        for session_set in self.sets:
            session_set.check_consistency()

    @property
    def total_sets(self) -> int:
        return len(self.sets)

    @property
    def completed_sets(self) -> int:
        return sum(1 for s in self.sets if s.completed)

    @property
    def is_completed(self) -> bool:
        return bool(self.sets) and all(s.completed for s in self.sets)

    @property
    def progress(self) -> float:
        if not self.sets:
            return 0.0
        return self.completed_sets / self.total_sets

    @property
    def total_volume(self) -> float:
        return sum(s.volume for s in self.sets if s.completed)

    @property
    def formatted_rest_time_to_next(self) -> str | None:
        if self.rest_time_to_next is None:
            return None
        minutes, seconds = divmod(int(self.rest_time_to_next), 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def has_notes(self) -> bool:
        return bool(self.notes)

    def find_set(self, set_id: UUID) -> SessionSet | None:
        return next((s for s in self.sets if s.id == set_id), None)

    def add_set(self, session_set: SessionSet) -> None:
        self.sets.append(session_set)

    def remove_set(self, index: int) -> None:
        if 0 <= index < len(self.sets):
            del self.sets[index]

    def complete_set(self, set_id: UUID, now: datetime | None = None) -> None:
        session_set = self.find_set(set_id)
        if session_set is not None:
            session_set.mark_completed(now)

    def complete_all_sets(self, now: datetime | None = None) -> None:
        now = now or utcnow()
        for session_set in self.sets:
            session_set.mark_completed(now)


class WorkoutSession(BaseModel):
    """One performance of a workout template.

    State machine: active <-> paused, active -> completed,
    paused -> completed. `end_date` is set only once the session is
    completed.
    """
    id: UUID = Field(default_factory=uuid4)
    workout_id: UUID
    start_date: datetime = Field(default_factory=utcnow)
    end_date: datetime | None = None
    exercises: list[SessionExercise] = Field(default_factory=list)
    state: SessionState = SessionState.ACTIVE
    workout_name: str | None = None

    @model_validator(mode="after")
    def validate_lifecycle(self) -> "WorkoutSession":
        self._check_end_date()
        _check_unique_order(self.exercises, "session")
        return self

    def _check_end_date(self) -> None:
        completed = self.state == SessionState.COMPLETED
        if completed != (self.end_date is not None):
            raise ValidationError(
                "end_date",
                "end_date must be set if and only if the session is completed",
                {"field": "end_date", "state": self.state.value},
            )

    def check_consistency(self) -> None:
        """Re-check every invariant of the session and its children.

        Construction validates the same rules, but fields are assigned
        without validation, so the repositories call this before writing.
        """
        self._check_end_date()
        _check_unique_order(self.exercises, "session")
        for exercise in self.exercises:
            exercise.check_consistency()

    @property
    def total_sets(self) -> int:
        return sum(e.total_sets for e in self.exercises)

    @property
    def completed_sets(self) -> int:
        return sum(e.completed_sets for e in self.exercises)

    @property
    def progress(self) -> float:
        total = self.total_sets
        if total == 0:
            return 0.0
        return self.completed_sets / total

    @property
    def total_volume(self) -> float:
        return sum(e.total_volume for e in self.exercises)

    @property
    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    @property
    def all_exercises_completed(self) -> bool:
        return bool(self.exercises) and all(e.is_completed for e in self.exercises)

    def duration(self, now: datetime | None = None) -> float:
        """Seconds from start to end, or to now while still running."""
        end = self.end_date or now or utcnow()
        return (end - self.start_date).total_seconds()

    def formatted_duration(self, now: datetime | None = None) -> str:
        total_seconds = int(self.duration(now))
        hours, remainder = divmod(total_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes:02d}:{seconds:02d}"

    def find_exercise(self, exercise_id: UUID) -> SessionExercise | None:
        return next((e for e in self.exercises if e.id == exercise_id), None)

    def sorted_by_order_index(self) -> "WorkoutSession":
        """Copy with exercises and their sets ordered by order_index."""
        session = self.model_copy(deep=True)
        session.exercises.sort(key=lambda e: e.order_index)
        for exercise in session.exercises:
            exercise.sets.sort(key=lambda s: s.order_index)
        return session
