"""Presentation-facing coordinator for the current workout session.

The store owns a detached copy of at most one session. Operations trap
their own errors into `error` instead of raising; observers subscribe to
change events rather than receiving results.
"""
import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable
from uuid import UUID

from gymbo.config.settings import get_settings
from gymbo.core.clock import Clock, utcnow
from gymbo.core.exceptions import BusinessRuleError
from gymbo.core.logging import get_logger
from gymbo.models.enums import SessionState
from gymbo.repositories.base import SessionRepository
from gymbo.schemas.session import WorkoutSession
from gymbo.services.complete_set import CompleteSetUseCase
from gymbo.services.end_session import (
    EndSessionUseCase,
    PauseSessionUseCase,
    ResumeSessionUseCase,
)
from gymbo.services.rest_timer import RestTimerStateManager
from gymbo.services.start_session import StartSessionUseCase

logger = get_logger(__name__)


class StoreEventKind(str, Enum):
    SESSION_CHANGED = "session_changed"
    LOADING_CHANGED = "loading_changed"
    ERROR_CHANGED = "error_changed"
    MESSAGE_CHANGED = "message_changed"


@dataclass(frozen=True)
class StoreEvent:
    kind: StoreEventKind
    store: "SessionStore"


Listener = Callable[[StoreEvent], Any]

MSG_STARTED = "Workout started!"
MSG_COMPLETED = "Workout completed!"
MSG_PAUSED = "Workout paused"
MSG_RESUMED = "Workout resumed"


def _no_active_session() -> BusinessRuleError:
    return BusinessRuleError("No active session", code="BR_NO_ACTIVE_SESSION")


class SessionStore:
    def __init__(
        self,
        start_session_use_case: StartSessionUseCase,
        complete_set_use_case: CompleteSetUseCase,
        end_session_use_case: EndSessionUseCase,
        pause_session_use_case: PauseSessionUseCase,
        resume_session_use_case: ResumeSessionUseCase,
        session_repository: SessionRepository,
        rest_timer: RestTimerStateManager | None = None,
        success_message_seconds: float | None = None,
        completed_session_linger_seconds: float | None = None,
        clock: Clock = utcnow,
    ):
        settings = get_settings()
        self._start_session = start_session_use_case
        self._complete_set = complete_set_use_case
        self._end_session = end_session_use_case
        self._pause_session = pause_session_use_case
        self._resume_session = resume_session_use_case
        self._repository = session_repository
        self._rest_timer = rest_timer
        self._clock = clock
        self._message_seconds = (
            settings.success_message_seconds if success_message_seconds is None else success_message_seconds
        )
        self._linger_seconds = (
            settings.completed_session_linger_seconds
            if completed_session_linger_seconds is None
            else completed_session_linger_seconds
        )

        self._current_session: WorkoutSession | None = None
        self._is_loading = False
        self._error: Exception | None = None
        self._success_message: str | None = None

        self._listeners: list[Listener] = []
        self._operation_lock = asyncio.Lock()
        self._message_task: asyncio.Task | None = None
        self._clear_session_task: asyncio.Task | None = None

    # Observable state

    @property
    def current_session(self) -> WorkoutSession | None:
        return self._current_session

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> Exception | None:
        return self._error

    @property
    def success_message(self) -> str | None:
        return self._success_message

    @property
    def has_active_session(self) -> bool:
        return self._current_session is not None

    @property
    def current_duration(self) -> float:
        if self._current_session is None:
            return 0.0
        return self._current_session.duration(self._clock())

    @property
    def current_progress(self) -> float:
        return self._current_session.progress if self._current_session else 0.0

    @property
    def total_sets(self) -> int:
        return self._current_session.total_sets if self._current_session else 0

    @property
    def completed_sets(self) -> int:
        return self._current_session.completed_sets if self._current_session else 0

    @property
    def is_paused(self) -> bool:
        return self._current_session is not None and self._current_session.state == SessionState.PAUSED

    # Change notification

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener` for change events. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, kind: StoreEventKind) -> None:
        event = StoreEvent(kind=kind, store=self)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("store_listener_failed", kind=kind.value)

    def _set_current_session(self, session: WorkoutSession | None) -> None:
        self._current_session = session
        self._publish(StoreEventKind.SESSION_CHANGED)

    def _set_loading(self, value: bool) -> None:
        if self._is_loading != value:
            self._is_loading = value
            self._publish(StoreEventKind.LOADING_CHANGED)

    def _set_error(self, error: Exception | None) -> None:
        if self._error is None and error is None:
            return
        self._error = error
        self._publish(StoreEventKind.ERROR_CHANGED)

    def _set_message(self, message: str | None) -> None:
        self._success_message = message
        self._publish(StoreEventKind.MESSAGE_CHANGED)

    def _record_failure(self, operation: str, error: Exception) -> None:
        logger.error(
            "session_store_operation_failed",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
        )
        self._set_error(error)

    # Public actions

    async def start_session(self, workout_id: UUID) -> None:
        async with self._operation_lock:
            self._set_loading(True)
            self._set_error(None)
            try:
                session = await self._start_session.execute(workout_id)
            except Exception as e:
                self._record_failure("start_session", e)
                return
            finally:
                self._set_loading(False)

            self._cancel_pending_clear()
            self._set_current_session(session)
            self._show_success_message(MSG_STARTED)

    async def complete_set(self, exercise_id: UUID, set_id: UUID) -> None:
        """Complete a set with instant local feedback, then reconcile.

        The local copy is updated before anything is awaited. Whether the
        use case succeeds or fails, the session is re-read from the
        repository and replaces the local copy.
        """
        if self._current_session is None:
            self._set_error(_no_active_session())
            return
        session_id = self._current_session.id

        self._update_local_set(exercise_id, set_id, completed=True)

        async with self._operation_lock:
            try:
                await self._complete_set.execute(session_id, exercise_id, set_id)
            except Exception as e:
                self._record_failure("complete_set", e)
                await self._reload(session_id)
                return

            await self._reload(session_id)
            self._start_rest_timer(exercise_id)

    async def end_session(self) -> None:
        if self._current_session is None:
            self._set_error(_no_active_session())
            return
        session_id = self._current_session.id

        async with self._operation_lock:
            self._set_loading(True)
            self._set_error(None)
            try:
                completed = await self._end_session.execute(session_id)
            except Exception as e:
                self._record_failure("end_session", e)
                return
            finally:
                self._set_loading(False)

            self._set_current_session(completed)
            self._schedule_clear_session(completed.id)
            if self._rest_timer is not None:
                self._rest_timer.cancel_rest()
            self._show_success_message(MSG_COMPLETED)

    async def pause_session(self) -> None:
        if self._current_session is None:
            return
        session_id = self._current_session.id

        async with self._operation_lock:
            try:
                await self._pause_session.execute(session_id)
            except Exception as e:
                self._record_failure("pause_session", e)
                return
            await self._reload(session_id)
            self._show_success_message(MSG_PAUSED)

    async def resume_session(self) -> None:
        if self._current_session is None:
            return
        session_id = self._current_session.id

        async with self._operation_lock:
            try:
                await self._resume_session.execute(session_id)
            except Exception as e:
                self._record_failure("resume_session", e)
                return
            await self._reload(session_id)
            self._show_success_message(MSG_RESUMED)

    async def load_active_session(self) -> None:
        """Restore the active session on launch, straight from the repository."""
        async with self._operation_lock:
            self._set_loading(True)
            try:
                session = await self._repository.fetch_active_session()
            except Exception as e:
                self._record_failure("load_active_session", e)
                return
            finally:
                self._set_loading(False)
            self._set_current_session(session)

    async def refresh_current_session(self) -> None:
        if self._current_session is None:
            return
        async with self._operation_lock:
            if self._current_session is not None:
                await self._reload(self._current_session.id)

    async def aclose(self) -> None:
        """Cancel pending message and session-clearing tasks."""
        tasks = [t for t in (self._message_task, self._clear_session_task) if t is not None]
        self._message_task = None
        self._clear_session_task = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass

    # Helpers

    async def _reload(self, session_id: UUID) -> None:
        try:
            session = await self._repository.fetch(session_id)
        except Exception as e:
            self._record_failure("refresh_session", e)
            return
        self._set_current_session(session)

    def _update_local_set(self, exercise_id: UUID, set_id: UUID, completed: bool) -> None:
        session = self._current_session.model_copy(deep=True)

        exercise = session.find_exercise(exercise_id)
        if exercise is None:
            logger.debug("local_update_skipped", reason="exercise_not_found", exercise_id=str(exercise_id))
            return

        session_set = exercise.find_set(set_id)
        if session_set is None:
            logger.debug("local_update_skipped", reason="set_not_found", set_id=str(set_id))
            return

        if completed:
            session_set.mark_completed(self._clock())
        else:
            session_set.mark_incomplete()
        self._set_current_session(session)

    def _start_rest_timer(self, exercise_id: UUID) -> None:
        if self._rest_timer is None or self._current_session is None:
            return
        exercise = self._current_session.find_exercise(exercise_id)
        if exercise is not None and exercise.rest_time_to_next:
            self._rest_timer.start_rest(exercise.rest_time_to_next)

    def _show_success_message(self, message: str) -> None:
        self._set_message(message)
        if self._message_task is not None:
            self._message_task.cancel()
        self._message_task = asyncio.get_running_loop().create_task(self._clear_message_later())

    async def _clear_message_later(self) -> None:
        await asyncio.sleep(self._message_seconds)
        self._message_task = None
        self._set_message(None)

    def _schedule_clear_session(self, session_id: UUID) -> None:
        self._cancel_pending_clear()
        self._clear_session_task = asyncio.get_running_loop().create_task(
            self._clear_session_later(session_id)
        )

    def _cancel_pending_clear(self) -> None:
        if self._clear_session_task is not None:
            self._clear_session_task.cancel()
            self._clear_session_task = None

    async def _clear_session_later(self, session_id: UUID) -> None:
        await asyncio.sleep(self._linger_seconds)
        self._clear_session_task = None
        if self._current_session is not None and self._current_session.id == session_id:
            self._set_current_session(None)
