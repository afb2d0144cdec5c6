"""Interfaces for the collaborators the timer and storage layers call out to.

Platform-specific behaviour (widgets, notification delivery, file dialogs)
lives behind these protocols so the core never branches on platform.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable


class FilePurpose(Enum):
    """Which remembered file a picker is choosing."""
    GOALS = "goals"
    LEDGER = "ledger"


@runtime_checkable
class ExternalMirror(Protocol):
    """Read-only live projection of the timer (status bar, lock screen, widget)."""

    def start(self, goal_name: str, goal_emoji: str, planned_seconds: int, remaining_seconds: int) -> None:
        ...

    def update(self, remaining_seconds: int, is_running: bool) -> None:
        ...

    def end(self) -> None:
        ...


@runtime_checkable
class Notifier(Protocol):
    """Delivers a user-facing notification."""

    def notify(self, title: str, body: str) -> None:
        ...


@runtime_checkable
class FilePicker(Protocol):
    """Asks the user for a file location."""

    async def pick_file(self, purpose: FilePurpose) -> Path | None:
        ...
