"""Session use cases."""
from gymbo.services.complete_set import CompleteSetUseCase
from gymbo.services.end_session import (
    EndSessionUseCase,
    PauseSessionUseCase,
    ResumeSessionUseCase,
)
from gymbo.services.start_session import StartSessionUseCase
from gymbo.services.workout_templates import (
    QuickWorkoutTemplateProvider,
    StaticWorkoutTemplateProvider,
    TemplateExercise,
    TemplateSet,
    WorkoutTemplate,
    WorkoutTemplateProvider,
)

__all__ = [
    "CompleteSetUseCase",
    "EndSessionUseCase",
    "PauseSessionUseCase",
    "ResumeSessionUseCase",
    "StartSessionUseCase",
    "QuickWorkoutTemplateProvider",
    "StaticWorkoutTemplateProvider",
    "TemplateExercise",
    "TemplateSet",
    "WorkoutTemplate",
    "WorkoutTemplateProvider",
]
