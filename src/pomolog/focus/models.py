"""Goal and session value types."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

# Shorter early finishes are discarded.
MIN_LOGGABLE_SECONDS = 60


@dataclass(frozen=True)
class Goal:
    """A named task or project that pomodoros are logged against.

    Example:
        goal = Goal(emoji="📚", name="Read Book", type="Project", priority=2.0)
    """
    name: str
    emoji: str = ""
    type: str = ""
    status: str = ""
    priority: float = 0.0
    context: str = ""
    due: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def label(self) -> str:
        """Emoji and name, as shown in notifications."""
        return f"{self.emoji} {self.name}".strip()


@dataclass(frozen=True)
class PomodoroSession:
    """One finished pomodoro, handed to the ledger for appending."""
    goal: Goal
    start_time: datetime
    end_time: datetime
    duration_seconds: int


def default_goals() -> list[Goal]:
    """Goals used when no goal file yields any usable rows."""
    return [
        Goal(emoji="📋", name="Default Goal 1", type="Project", status="Active",
             priority=1.0, context="General"),
        Goal(emoji="🎯", name="Default Goal 2", type="Project", status="Active",
             priority=1.0, context="General"),
    ]
