"""Conversion between session value records and persisted rows."""
from gymbo.models.enums import SessionState
from gymbo.models.session import (
    SessionExerciseRecord,
    SessionSetRecord,
    WorkoutSessionRecord,
)
from gymbo.schemas.session import SessionExercise, SessionSet, WorkoutSession


class SessionMapper:
    """Stateless mapper between the domain values and SQLAlchemy records."""

    # Sessions

    def to_record(self, session: WorkoutSession) -> WorkoutSessionRecord:
        return WorkoutSessionRecord(
            id=session.id,
            workout_id=session.workout_id,
            start_date=session.start_date,
            end_date=session.end_date,
            state=session.state.value,
            workout_name=session.workout_name,
            exercises=[self.exercise_to_record(e) for e in session.exercises],
        )

    def to_domain(self, record: WorkoutSessionRecord) -> WorkoutSession:
        try:
            state = SessionState(record.state)
        except ValueError:
            state = SessionState.ACTIVE
        return WorkoutSession(
            id=record.id,
            workout_id=record.workout_id,
            start_date=record.start_date,
            end_date=record.end_date,
            exercises=[
                self.exercise_to_domain(e)
                for e in sorted(record.exercises, key=lambda e: e.order_index)
            ],
            state=state,
            workout_name=record.workout_name,
        )

    def to_domain_list(self, records: list[WorkoutSessionRecord]) -> list[WorkoutSession]:
        return [self.to_domain(r) for r in records]

    def update_record(self, record: WorkoutSessionRecord, session: WorkoutSession) -> None:
        """Merge `session` into an existing record graph in place.

        Children are matched by id: matches are updated field by field, new
        ids are appended and ids missing from `session` are dropped. Rows
        that survive keep their primary key.
        """
        record.workout_id = session.workout_id
        record.start_date = session.start_date
        record.end_date = session.end_date
        record.state = session.state.value
        record.workout_name = session.workout_name

        existing = {e.id: e for e in record.exercises}
        for exercise in session.exercises:
            exercise_record = existing.get(exercise.id)
            if exercise_record is None:
                record.exercises.append(self.exercise_to_record(exercise))
            else:
                self._update_exercise_record(exercise_record, exercise)

        keep = {e.id for e in session.exercises}
        for exercise_record in list(record.exercises):
            if exercise_record.id not in keep:
                record.exercises.remove(exercise_record)

    # Exercises

    def exercise_to_record(self, exercise: SessionExercise) -> SessionExerciseRecord:
        return SessionExerciseRecord(
            id=exercise.id,
            exercise_id=exercise.exercise_id,
            notes=exercise.notes,
            rest_time_to_next=exercise.rest_time_to_next,
            order_index=exercise.order_index,
            sets=[self.set_to_record(s) for s in exercise.sets],
        )

    def exercise_to_domain(self, record: SessionExerciseRecord) -> SessionExercise:
        return SessionExercise(
            id=record.id,
            exercise_id=record.exercise_id,
            sets=[
                self.set_to_domain(s)
                for s in sorted(record.sets, key=lambda s: s.order_index)
            ],
            notes=record.notes,
            rest_time_to_next=record.rest_time_to_next,
            order_index=record.order_index,
        )

    def _update_exercise_record(self, record: SessionExerciseRecord, exercise: SessionExercise) -> None:
        record.exercise_id = exercise.exercise_id
        record.notes = exercise.notes
        record.rest_time_to_next = exercise.rest_time_to_next
        record.order_index = exercise.order_index

        existing = {s.id: s for s in record.sets}
        for session_set in exercise.sets:
            set_record = existing.get(session_set.id)
            if set_record is None:
                record.sets.append(self.set_to_record(session_set))
            else:
                self._update_set_record(set_record, session_set)

        keep = {s.id for s in exercise.sets}
        for set_record in list(record.sets):
            if set_record.id not in keep:
                record.sets.remove(set_record)

    # Sets

    def set_to_record(self, session_set: SessionSet) -> SessionSetRecord:
        return SessionSetRecord(
            id=session_set.id,
            weight=session_set.weight,
            reps=session_set.reps,
            completed=session_set.completed,
            completed_at=session_set.completed_at,
            order_index=session_set.order_index,
        )

    def set_to_domain(self, record: SessionSetRecord) -> SessionSet:
        return SessionSet(
            id=record.id,
            weight=record.weight,
            reps=record.reps,
            completed=record.completed,
            completed_at=record.completed_at,
            order_index=record.order_index,
        )

    @staticmethod
    def _update_set_record(record: SessionSetRecord, session_set: SessionSet) -> None:
        record.weight = session_set.weight
        record.reps = session_set.reps
        record.completed = session_set.completed
        record.completed_at = session_set.completed_at
        record.order_index = session_set.order_index
