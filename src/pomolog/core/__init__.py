"""Core configuration and error types."""

from pomolog.core.config import Config
from pomolog.core.errors import (
    EmptyOrUnparsableError,
    FileUnavailableError,
    LedgerWriteError,
    PomologError,
    TimerStateError,
)

__all__ = [
    "Config",
    "PomologError",
    "FileUnavailableError",
    "EmptyOrUnparsableError",
    "LedgerWriteError",
    "TimerStateError",
]
