"""Error types raised by the goal store, ledger and timer."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pomolog.focus.models import PomodoroSession


class PomologError(Exception):
    """Base class for all pomolog errors."""


class FileUnavailableError(PomologError):
    """A file location is missing or cannot be read."""

    def __init__(self, path: Path | None, reason: str = "not available"):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class EmptyOrUnparsableError(PomologError):
    """A file exists but yields no usable records."""

    def __init__(self, path: Path | None, reason: str = "no usable records"):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class LedgerWriteError(PomologError):
    """A session could not be appended to the ledger.

    Carries the session so the caller can retry the same append
    against another location.
    """

    def __init__(self, session: PomodoroSession, path: Path, cause: Exception | None = None):
        self.session = session
        self.path = path
        self.cause = cause
        super().__init__(f"Could not write pomodoro to {path}: {cause}")


class TimerStateError(PomologError):
    """An operation is not allowed in the timer's current state."""
