"""Rest timer between sets, persisted so it survives a restart."""
import asyncio
from datetime import datetime, timedelta
from pathlib import Path

from pydantic import BaseModel

from gymbo.config.settings import get_settings
from gymbo.core.clock import Clock, utcnow
from gymbo.core.logging import get_logger

logger = get_logger(__name__)


class RestTimerState(BaseModel):
    duration: float
    end_date: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utcnow()) >= self.end_date

    def remaining(self, now: datetime | None = None) -> float:
        return max(0.0, (self.end_date - (now or utcnow())).total_seconds())


class RestTimerStateManager:
    """Start, cancel and restore the rest timer.

    The current state is written to a JSON file. On construction a saved
    state is restored only if it has not expired and ended within the
    restore window, so stale timers never leak into a new workout. When an
    event loop is running, each `start_rest` schedules an expiry task and
    cancels the previous one.
    """

    def __init__(
        self,
        state_path: Path | None = None,
        restore_window_seconds: float | None = None,
        clock: Clock = utcnow,
    ):
        settings = get_settings()
        self._state_path = Path(state_path or settings.rest_timer_state_path)
        self._restore_window = timedelta(
            seconds=settings.rest_timer_restore_window_seconds
            if restore_window_seconds is None
            else restore_window_seconds
        )
        self._clock = clock
        self._expiry_task: asyncio.Task | None = None
        self.current_state: RestTimerState | None = None
        self._load_state()

    @property
    def is_running(self) -> bool:
        return self.current_state is not None and not self.current_state.is_expired(self._clock())

    def start_rest(self, duration: float) -> RestTimerState:
        now = self._clock()
        self.current_state = RestTimerState(duration=duration, end_date=now + timedelta(seconds=duration))
        self.save_state()
        self._schedule_expiry(duration)
        logger.info("rest_timer_started", duration=duration)
        return self.current_state

    def cancel_rest(self) -> None:
        self._cancel_expiry()
        self.current_state = None
        self._clear_state()

    def check_expiration(self) -> None:
        if self.current_state is not None and self.current_state.is_expired(self._clock()):
            self.cancel_rest()

    async def aclose(self) -> None:
        task = self._expiry_task
        self._cancel_expiry()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    # Expiry task

    def _schedule_expiry(self, duration: float) -> None:
        self._cancel_expiry()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._expiry_task = loop.create_task(self._expire_after(duration))

    def _cancel_expiry(self) -> None:
        if self._expiry_task is not None and not self._expiry_task.done():
            self._expiry_task.cancel()
        self._expiry_task = None

    async def _expire_after(self, duration: float) -> None:
        await asyncio.sleep(duration)
        self._expiry_task = None
        self.current_state = None
        self._clear_state()
        logger.info("rest_timer_finished", duration=duration)

    # Persistence

    def save_state(self) -> None:
        """Write the current state to `state_path`.

        The write is synchronous and runs on the event loop when called
        from the store. The file is a few dozen bytes on local disk; move
        this to `asyncio.to_thread` if the path ever points at slow storage.
        """
        if self.current_state is None:
            return
        self._state_path.parent.mkdir(parents=True, exist_ok=True)
        self._state_path.write_text(self.current_state.model_dump_json(), encoding="utf-8")

    def _load_state(self) -> None:
        if not self._state_path.exists():
            return
        try:
            state = RestTimerState.model_validate_json(self._state_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("rest_timer_state_unreadable", path=str(self._state_path), error=str(e))
            self._clear_state()
            return

        now = self._clock()
        was_recently_saved = state.end_date > now - self._restore_window
        if not state.is_expired(now) and was_recently_saved:
            self.current_state = state
        else:
            self._clear_state()

    def _clear_state(self) -> None:
        self._state_path.unlink(missing_ok=True)
