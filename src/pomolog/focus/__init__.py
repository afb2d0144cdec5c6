"""Pomodoro timer, goals, and the collaborator interfaces it drives."""

from pomolog.focus.collaborators import ExternalMirror, FilePicker, FilePurpose, Notifier
from pomolog.focus.models import MIN_LOGGABLE_SECONDS, Goal, PomodoroSession, default_goals
from pomolog.focus.pomodoro import TimerEngine, TimerPhase, TimerState

__all__ = [
    "ExternalMirror",
    "FilePicker",
    "FilePurpose",
    "Notifier",
    "MIN_LOGGABLE_SECONDS",
    "Goal",
    "PomodoroSession",
    "default_goals",
    "TimerEngine",
    "TimerPhase",
    "TimerState",
]
