"""Pomodoro timer state machine that logs sessions against goals."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from pomolog.core.config import TimerConfig
from pomolog.core.errors import LedgerWriteError, TimerStateError
from pomolog.focus.collaborators import ExternalMirror, Notifier
from pomolog.focus.models import Goal, PomodoroSession, default_goals, MIN_LOGGABLE_SECONDS

if TYPE_CHECKING:
    from pomolog.storage.goal_store import GoalStore
    from pomolog.storage.ledger import PomodoroLedger

logger = logging.getLogger(__name__)

MIN_LENGTH_MINUTES = 1
MAX_LENGTH_MINUTES = 120


class TimerPhase(Enum):
    """Where the timer is in its lifecycle."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass
class TimerState:
    """Current state of the timer."""
    pomodoro_length_minutes: int = 25
    remaining_seconds: int = 25 * 60
    is_running: bool = False
    selected_goal_index: int = 0
    session_start: datetime | None = None

    @property
    def planned_seconds(self) -> int:
        return self.pomodoro_length_minutes * 60

    @property
    def phase(self) -> TimerPhase:
        if self.is_running:
            return TimerPhase.RUNNING
        if self.session_start is not None:
            return TimerPhase.PAUSED
        return TimerPhase.IDLE

    @property
    def time_display(self) -> str:
        """Format time remaining as MM:SS."""
        minutes, seconds = divmod(self.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"


WriteFailureHandler = Callable[[PomodoroSession, LedgerWriteError], Awaitable[None] | None]


class TimerEngine:
    """Countdown timer that notifies, logs and mirrors each pomodoro.

    All state changes happen on the event loop that owns the engine; the
    per-second countdown runs as a task on that loop and file I/O is
    pushed to worker threads by the storage layer.

    Usage:
        engine = TimerEngine(ledger=ledger, goal_store=store, mirror=mirror, notifier=notifier)
        await engine.load_goals()
        engine.select_goal(0)

        await engine.start()
        # ... timer runs ...
        await engine.pause()
        await engine.start()         # resume
        await engine.finish_early()  # log if at least a minute has passed
        await engine.reset()         # discard
    """

    def __init__(
        self,
        ledger: PomodoroLedger | None = None,
        goal_store: GoalStore | None = None,
        mirror: ExternalMirror | None = None,
        notifier: Notifier | None = None,
        config: TimerConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
        tick_seconds: float | None = None,
    ):
        self.config = config or TimerConfig()
        self.ledger = ledger
        self.goal_store = goal_store
        self.mirror = mirror
        self.notifier = notifier
        self._clock = clock
        self._tick_seconds = tick_seconds if tick_seconds is not None else self.config.tick_seconds

        length = self.config.pomodoro_minutes
        self._state = TimerState(pomodoro_length_minutes=length, remaining_seconds=length * 60)
        self._goals: list[Goal] = []
        self._task: asyncio.Task | None = None
        self._finishing = False

        # Called with the session and error when the ledger cannot be written
        self.on_write_failure: WriteFailureHandler | None = None

    @property
    def state(self) -> TimerState:
        """Get current timer state (read-only copy)."""
        return replace(self._state)

    @property
    def goals(self) -> list[Goal]:
        return list(self._goals)

    @property
    def selected_goal(self) -> Goal | None:
        """The selected goal, or None if the goal list no longer contains it."""
        index = self._state.selected_goal_index
        if 0 <= index < len(self._goals):
            return self._goals[index]
        return None

    @property
    def time_display(self) -> str:
        return self._state.time_display

    @property
    def is_finishing(self) -> bool:
        """True while a finished session is being written to the ledger."""
        return self._finishing

    # -- configuration --------------------------------------------------

    def set_goals(self, goals: list[Goal]) -> None:
        """Replace the goal list and select the first goal."""
        self._goals = list(goals)
        self._state.selected_goal_index = 0

    async def load_goals(self) -> list[Goal]:
        """Load goals from the store, falling back to the built-in defaults."""
        goals: list[Goal] = []
        if self.goal_store is not None:
            goals = await self.goal_store.load()

        if not goals:
            logger.warning("No goals loaded, using default goals")
            goals = default_goals()

        self.set_goals(goals)
        return self.goals

    def select_goal(self, index: int) -> None:
        """Select the goal that the next session is logged against."""
        if not 0 <= index < len(self._goals):
            raise IndexError(f"Goal index {index} out of range (have {len(self._goals)} goals)")
        self._state.selected_goal_index = index

    def set_length(self, minutes: int) -> None:
        """Change the pomodoro length. Only allowed while idle."""
        if not MIN_LENGTH_MINUTES <= minutes <= MAX_LENGTH_MINUTES:
            raise ValueError(
                f"Pomodoro length must be {MIN_LENGTH_MINUTES}-{MAX_LENGTH_MINUTES} minutes, got {minutes}"
            )
        if self._state.phase is not TimerPhase.IDLE:
            raise TimerStateError("Cannot change pomodoro length while a session is in progress")

        self._state.pomodoro_length_minutes = minutes
        self._state.remaining_seconds = minutes * 60

    # -- transitions ----------------------------------------------------

    async def start(self) -> None:
        """Start or resume the timer."""
        if self._state.is_running or self._finishing:
            return

        first_start = self._state.session_start is None
        self._state.is_running = True
        if first_start:
            self._state.session_start = self._clock()

        await self._cancel_countdown()
        self._task = asyncio.create_task(self._countdown())

        if first_start:
            logger.info(f"Pomodoro started: {self._state.pomodoro_length_minutes} minutes")
            goal = self.selected_goal
            self._mirror(
                "start",
                goal.name if goal else "",
                goal.emoji if goal else "",
                self._state.planned_seconds,
                self._state.remaining_seconds,
            )
        else:
            logger.info(f"Pomodoro resumed with {self._state.time_display} remaining")
            self._mirror("update", self._state.remaining_seconds, True)

    async def pause(self) -> None:
        """Pause the timer."""
        if not self._state.is_running:
            return

        self._state.is_running = False
        await self._cancel_countdown()

        logger.info(f"Pomodoro paused with {self._state.time_display} remaining")
        self._mirror("update", self._state.remaining_seconds, False)

    async def toggle(self) -> None:
        """Start when stopped, pause when running."""
        if self._state.is_running:
            await self.pause()
        else:
            await self.start()

    async def reset(self) -> None:
        """Discard the current session and return to idle."""
        await self._cancel_countdown()

        self._state.is_running = False
        self._state.remaining_seconds = self._state.planned_seconds
        self._state.session_start = None

        logger.info("Pomodoro reset")
        self._mirror("end")

    async def finish_early(self) -> bool:
        """End the session now, logging it if it lasted at least a minute.

        Returns True if the session was logged.
        """
        start = self._state.session_start
        if start is None or self._finishing:
            return False

        self._finishing = True
        logged = False
        try:
            self._state.is_running = False
            await self._cancel_countdown()

            end = self._clock()
            elapsed = int((end - start).total_seconds())
            goal = self.selected_goal

            if elapsed >= MIN_LOGGABLE_SECONDS and goal is not None:
                session = PomodoroSession(goal=goal, start_time=start, end_time=end, duration_seconds=elapsed)
                await self._persist(session)
                self._notify(
                    "Pomodoro Completed Early",
                    f"You completed a {elapsed // 60} minute pomodoro for: {goal.emoji} {goal.name}",
                )
                logged = True
            else:
                logger.info(f"Early finish after {elapsed}s not logged")
        finally:
            self._finishing = False
            await self.reset()

        return logged

    async def tick(self) -> None:
        """Advance the countdown by one second."""
        if not self._state.is_running or self._finishing:
            return

        if self._state.remaining_seconds > 0:
            self._state.remaining_seconds -= 1
            self._mirror("update", self._state.remaining_seconds, True)
        else:
            await self._complete()

    # -- internals ------------------------------------------------------

    async def _countdown(self) -> None:
        """Main timer tick loop."""
        try:
            while self._state.is_running:
                await asyncio.sleep(self._tick_seconds)
                if not self._state.is_running:
                    break
                await self.tick()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error in timer tick loop: {e}")

    async def _cancel_countdown(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done() or task is asyncio.current_task():
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _complete(self) -> None:
        """Handle natural completion: log the planned duration, notify, reset."""
        start = self._state.session_start
        self._finishing = True
        try:
            self._state.is_running = False
            await self._cancel_countdown()

            length = self._state.pomodoro_length_minutes
            goal = self.selected_goal
            logger.info(f"Pomodoro complete: {length} minutes")

            if goal is not None and start is not None:
                session = PomodoroSession(
                    goal=goal,
                    start_time=start,
                    end_time=self._clock(),
                    duration_seconds=self._state.planned_seconds,
                )
                await self._persist(session)
                body = f"Great job! You've completed a {length} minute pomodoro for: {goal.emoji} {goal.name}"
            else:
                body = f"Great job! You've completed a {length} minute pomodoro!"

            self._notify("Pomodoro Completed!", body)
        finally:
            self._finishing = False
            await self.reset()

    async def _persist(self, session: PomodoroSession) -> None:
        if self.ledger is None:
            return

        try:
            await self.ledger.record(session)
        except LedgerWriteError as e:
            logger.error(f"Pomodoro for {session.goal.label} was not saved: {e}")
            if self.on_write_failure:
                try:
                    result = self.on_write_failure(session, e)
                    if asyncio.iscoroutine(result):
                        await result
                except Exception as callback_error:
                    logger.error(f"Error in on_write_failure callback: {callback_error}")
        except Exception as e:
            logger.error(f"Error saving pomodoro: {e}")

    def _notify(self, title: str, body: str) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify(title, body)
        except Exception as e:
            logger.error(f"Error sending notification: {e}")

    def _mirror(self, method: str, *args: Any) -> None:
        if self.mirror is None:
            return
        try:
            getattr(self.mirror, method)(*args)
        except Exception as e:
            logger.error(f"Error in mirror {method}: {e}")

    def get_summary(self) -> dict:
        """Get a summary of the current timer state."""
        goal = self.selected_goal
        return {
            "phase": self._state.phase.value,
            "is_running": self._state.is_running,
            "time_remaining": self._state.time_display,
            "remaining_seconds": self._state.remaining_seconds,
            "pomodoro_minutes": self._state.pomodoro_length_minutes,
            "goal": goal.label if goal else None,
            "session_started_at": self._state.session_start.isoformat() if self._state.session_start else None,
        }
