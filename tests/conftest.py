"""Shared fakes for timer and storage tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from pomolog.core.config import Config
from pomolog.focus.collaborators import FilePurpose


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2025, 1, 6, 9, 0, 0)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class RecordingMirror:
    def __init__(self):
        self.calls: list[tuple] = []

    def start(self, goal_name, goal_emoji, planned_seconds, remaining_seconds):
        self.calls.append(("start", goal_name, goal_emoji, planned_seconds, remaining_seconds))

    def update(self, remaining_seconds, is_running):
        self.calls.append(("update", remaining_seconds, is_running))

    def end(self):
        self.calls.append(("end",))

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


class RecordingNotifier:
    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    def notify(self, title, body):
        self.sent.append((title, body))


class ScriptedPicker:
    """Returns queued answers per purpose, None once exhausted."""

    def __init__(self, **answers: list[Path | None]):
        self.answers = {FilePurpose(key): list(value) for key, value in answers.items()}
        self.asked: list[FilePurpose] = []

    async def pick_file(self, purpose):
        self.asked.append(purpose)
        queue = self.answers.get(purpose, [])
        return queue.pop(0) if queue else None


class ClosedStdinPicker:
    """Fails the way a terminal prompt does without a tty."""

    async def pick_file(self, purpose):
        raise EOFError("stdin closed")


class RecordingLedger:
    def __init__(self, error: Exception | None = None):
        self.sessions = []
        self.error = error

    async def record(self, session):
        self.sessions.append(session)
        if self.error:
            raise self.error
        return Path("ledger.csv")


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(
        data_dir=tmp_path / "data",
        log_dir=tmp_path / "logs",
        config_dir=tmp_path / "config",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mirror() -> RecordingMirror:
    return RecordingMirror()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
