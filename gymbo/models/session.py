"""Persisted records for sessions, their exercises and their sets.

Each table carries an integer surrogate key plus the domain UUID. Child
rows are owned by their parent and removed with it.
"""
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
)
from sqlalchemy.orm import relationship

from gymbo.db.database import Base
from gymbo.models.enums import SessionState


class WorkoutSessionRecord(Base):
    __tablename__ = "workout_sessions"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Uuid, unique=True, nullable=False)
    workout_id = Column(Uuid, nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    state = Column(String(16), nullable=False, default=SessionState.ACTIVE.value)
    workout_name = Column(String(255), nullable=True)

    exercises = relationship(
        "SessionExerciseRecord",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_workout_sessions_state", "state"),
        Index("ix_workout_sessions_start_date", "start_date"),
    )

    def __repr__(self):
        return f"<WorkoutSessionRecord(id={self.id}, state={self.state})>"


class SessionExerciseRecord(Base):
    __tablename__ = "session_exercises"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Uuid, unique=True, nullable=False)
    session_pk = Column(
        Integer,
        ForeignKey("workout_sessions.pk", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    exercise_id = Column(Uuid, nullable=False)
    notes = Column(String, nullable=True)
    rest_time_to_next = Column(Float, nullable=True)
    order_index = Column(Integer, nullable=False, default=0)

    session = relationship("WorkoutSessionRecord", back_populates="exercises")
    sets = relationship(
        "SessionSetRecord",
        back_populates="exercise",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class SessionSetRecord(Base):
    __tablename__ = "session_sets"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Uuid, unique=True, nullable=False)
    exercise_pk = Column(
        Integer,
        ForeignKey("session_exercises.pk", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    weight = Column(Float, nullable=False)
    reps = Column(Integer, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)
    order_index = Column(Integer, nullable=False, default=0)

    exercise = relationship("SessionExerciseRecord", back_populates="sets")
