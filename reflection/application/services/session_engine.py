"""Session engine: runs one focus session at a time and records it when it ends."""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from reflection.application.services.change_notifier import ChangeEvent, ChangeNotifier
from reflection.application.services.entity_store import EntityStore
from reflection.domain.entities import DEFAULT_EXPECTED_TIME, Session
from reflection.infrastructure.logging.colored_logger import StoreLogger, StoreStage

logger = logging.getLogger(__name__)
slog = StoreLogger("SessionEngine")


class SessionState(str, Enum):
    """Lifecycle states of the engine."""

    NO_SESSION = "no_session"
    ACTIVE = "active"
    PAUSED = "paused"


@dataclass
class RunningSession:
    """The in-flight session; becomes a Session record when it ends."""

    activity_id: UUID
    start_time: datetime
    task_description: str = ""
    goals: tuple[str, ...] = ()
    expected_time: float = DEFAULT_EXPECTED_TIME


class SessionEngine:
    """Drives elapsed-time accrual with a cancellable asyncio tick.

    The tick task exists only while a session is ACTIVE. Pausing, ending,
    discarding and shutdown all cancel it and wait for the cancellation, so
    no tick lands after any of those calls returns.

    Every transition updates the state before its first ``await``. Calls that
    overlap on the loop therefore see each other's effect: of two concurrent
    ``end_current_session`` calls only one records the session.
    """

    def __init__(
        self,
        store: EntityStore,
        notifier: ChangeNotifier | None = None,
        *,
        tick_seconds: float = 1.0,
    ):
        self._store = store
        self._notifier = notifier or store.notifier
        self._tick_seconds = tick_seconds
        self._state = SessionState.NO_SESSION
        self._current: RunningSession | None = None
        self._elapsed = 0.0
        self._tick_task: asyncio.Task | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current(self) -> RunningSession | None:
        return self._current

    @property
    def elapsed_time(self) -> float:
        return self._elapsed

    @property
    def is_ticking(self) -> bool:
        return self._tick_task is not None

    # ── Transitions ─────────────────────────────────────────────────

    async def start_session(
        self,
        activity_id: UUID,
        task_description: str = "",
        goals: Iterable[str] = (),
        expected_time: float = DEFAULT_EXPECTED_TIME,
    ) -> RunningSession:
        """Start a new session, ending any session that is still running."""
        if expected_time < 0:
            raise ValueError("expected_time must be >= 0")
        while self._state is not SessionState.NO_SESSION:
            await self.end_current_session()

        if self._store.get_activity(activity_id) is None:
            logger.warning("Starting session for unknown activity %s", activity_id)

        self._current = RunningSession(
            activity_id=activity_id,
            start_time=self._store.now(),
            task_description=task_description.strip(),
            goals=tuple(g.strip() for g in goals if g.strip()),
            expected_time=expected_time,
        )
        self._elapsed = 0.0
        self._state = SessionState.ACTIVE
        self._start_ticker()
        slog.step(StoreStage.SESSION, "Session started", activity_id=activity_id)
        self._announce()
        return self._current

    async def pause_session(self) -> bool:
        if self._state is not SessionState.ACTIVE:
            return False
        self._state = SessionState.PAUSED
        await self._stop_ticker()
        slog.debug(StoreStage.SESSION, "Session paused", elapsed=self._elapsed)
        self._announce()
        return True

    async def resume_session(self) -> bool:
        if self._state is not SessionState.PAUSED:
            return False
        self._state = SessionState.ACTIVE
        self._start_ticker()
        slog.debug(StoreStage.SESSION, "Session resumed", elapsed=self._elapsed)
        self._announce()
        return True

    async def end_current_session(
        self,
        actual_completion: str = "",
        reflection: str = "",
        follow_up: str = "",
    ) -> Session | None:
        """Stop the session and append it to today's DaySession.

        The three texts are the end-of-session review: what actually got
        done, how it went, and what comes next.
        """
        running, duration = self._take_current()
        await self._stop_ticker()
        if running is None:
            return None

        record = await self._store.add_session_to_today(
            activity_id=running.activity_id,
            start_time=running.start_time,
            duration=duration,
            task_description=running.task_description,
            goals=running.goals,
            expected_time=running.expected_time,
            actual_completion=actual_completion.strip(),
            reflection=reflection.strip(),
            follow_up=follow_up.strip(),
        )
        slog.step(StoreStage.SESSION, "Session recorded", activity_id=running.activity_id, duration=duration)
        self._announce()
        return record

    async def discard_session(self) -> bool:
        """Drop the running session without recording it."""
        running, _ = self._take_current()
        await self._stop_ticker()
        if running is None:
            return False
        slog.debug(StoreStage.SESSION, "Session discarded")
        self._announce()
        return True

    async def shutdown(self) -> None:
        """Cancel the tick; the running session, if any, is left unrecorded."""
        await self._stop_ticker()

    # ── Tick ────────────────────────────────────────────────────────

    def tick(self) -> None:
        """Accrue one tick of elapsed time while ACTIVE."""
        if self._state is SessionState.ACTIVE:
            self._elapsed += self._tick_seconds

    async def _run_ticker(self) -> None:
        while True:
            await asyncio.sleep(self._tick_seconds)
            self.tick()

    def _start_ticker(self) -> None:
        if self._tick_task is None:
            self._tick_task = asyncio.create_task(self._run_ticker())

    async def _stop_ticker(self) -> None:
        task, self._tick_task = self._tick_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def _take_current(self) -> tuple[RunningSession | None, float]:
        """Detach the running session and reset to NO_SESSION without awaiting."""
        running, elapsed = self._current, self._elapsed
        self._current = None
        self._elapsed = 0.0
        self._state = SessionState.NO_SESSION
        return running, elapsed

    def _announce(self) -> None:
        self._notifier.notify(ChangeEvent.SESSION_STATE_CHANGED, {"state": self._state.value})
