"""Workout templates consumed read-only when a session starts.

Template definitions live outside the session core; the start use case
only needs something that resolves a workout id to a name and a list of
planned exercises.
"""
from typing import Protocol
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from gymbo.schemas.session import SessionExercise, SessionSet


class TemplateSet(BaseModel):
    weight: float
    reps: int


class TemplateExercise(BaseModel):
    exercise_id: UUID
    sets: list[TemplateSet] = Field(default_factory=list)
    notes: str | None = None
    rest_time_to_next: float | None = None


class WorkoutTemplate(BaseModel):
    id: UUID
    name: str
    exercises: list[TemplateExercise] = Field(default_factory=list)

    def build_session_exercises(self) -> list[SessionExercise]:
        """Fresh session exercises with new ids and positional order indexes."""
        return [
            SessionExercise(
                exercise_id=exercise.exercise_id,
                sets=[
                    SessionSet(weight=s.weight, reps=s.reps, order_index=set_index)
                    for set_index, s in enumerate(exercise.sets)
                ],
                notes=exercise.notes,
                rest_time_to_next=exercise.rest_time_to_next,
                order_index=exercise_index,
            )
            for exercise_index, exercise in enumerate(self.exercises)
        ]


class WorkoutTemplateProvider(Protocol):
    async def get_template(self, workout_id: UUID) -> WorkoutTemplate | None:
        ...


class StaticWorkoutTemplateProvider:
    """Serves templates from a fixed mapping."""

    def __init__(self, templates: list[WorkoutTemplate] | None = None):
        self._templates = {t.id: t for t in templates or []}

    def add(self, template: WorkoutTemplate) -> None:
        self._templates[template.id] = template

    async def get_template(self, workout_id: UUID) -> WorkoutTemplate | None:
        return self._templates.get(workout_id)


QUICK_WORKOUT_NAME = "Quick Workout"


class QuickWorkoutTemplateProvider:
    """Resolves any workout id to the built-in three-exercise quick workout."""

    def __init__(self):
        # catalog ids stay stable for the lifetime of the provider
        self._exercise_ids = [uuid4(), uuid4(), uuid4()]

    async def get_template(self, workout_id: UUID) -> WorkoutTemplate | None:
        first, second, third = self._exercise_ids
        return WorkoutTemplate(
            id=workout_id,
            name=QUICK_WORKOUT_NAME,
            exercises=[
                TemplateExercise(
                    exercise_id=first,
                    sets=[TemplateSet(weight=100, reps=8)] * 3,
                    rest_time_to_next=90,
                ),
                TemplateExercise(
                    exercise_id=second,
                    sets=[TemplateSet(weight=80, reps=10)] * 3,
                    notes="Focus on form",
                    rest_time_to_next=90,
                ),
                TemplateExercise(
                    exercise_id=third,
                    sets=[TemplateSet(weight=60, reps=12)] * 3,
                    rest_time_to_next=60,
                ),
            ],
        )
