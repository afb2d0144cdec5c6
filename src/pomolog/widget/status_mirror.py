"""Mirrors the running timer into a JSON status file for external widgets."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable

logger = logging.getLogger(__name__)


class StatusFileMirror:
    """ExternalMirror that writes the timer projection to a JSON file.

    A menu-bar or lock-screen widget polls the file; nothing here reads
    it back into the timer.
    """

    def __init__(self, status_file: Path, clock: Callable[[], datetime] = datetime.now):
        self.status_file = status_file
        self._clock = clock
        self._status: dict[str, Any] = {"active": False}

    @property
    def status(self) -> dict[str, Any]:
        return dict(self._status)

    def start(self, goal_name: str, goal_emoji: str, planned_seconds: int, remaining_seconds: int) -> None:
        self._status = {
            "active": True,
            "goal_name": goal_name,
            "goal_emoji": goal_emoji,
            "planned_seconds": planned_seconds,
        }
        self._apply(remaining_seconds, True)

    def update(self, remaining_seconds: int, is_running: bool) -> None:
        if not self._status.get("active"):
            # Resumed or ticking without a start snapshot; still show the countdown.
            self._status = {"active": True, "goal_name": "", "goal_emoji": "", "planned_seconds": remaining_seconds}
        self._apply(remaining_seconds, is_running)

    def end(self) -> None:
        self._status = {"active": False}
        self._write()

    def _apply(self, remaining_seconds: int, is_running: bool) -> None:
        minutes, seconds = divmod(remaining_seconds, 60)
        end_time = self._clock() + timedelta(seconds=remaining_seconds) if is_running else None
        self._status.update(
            {
                "remaining_seconds": remaining_seconds,
                "time_remaining": f"{minutes:02d}:{seconds:02d}",
                "timer_running": is_running,
                "end_time": end_time.isoformat(timespec="seconds") if end_time else None,
            }
        )
        self._write()

    def _write(self) -> None:
        try:
            self.status_file.parent.mkdir(parents=True, exist_ok=True)
            self.status_file.write_text(json.dumps(self._status, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to write status file: {e}")


def read_status(status_file: Path) -> dict[str, Any]:
    """Read a status file written by StatusFileMirror."""
    if not status_file.exists():
        return {"active": False}
    try:
        return json.loads(status_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read status file {status_file}: {e}")
        return {"active": False}
