"""Append-only CSV ledger of finished pomodoros."""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from pathlib import Path

from pomolog.core.config import Config
from pomolog.core.errors import LedgerWriteError
from pomolog.focus.collaborators import FilePicker, FilePurpose
from pomolog.focus.models import PomodoroSession
from pomolog.storage.log_format import DEFAULT_LOG_FORMAT, LogFormat, LogFormatDetector

logger = logging.getLogger(__name__)

# Canonical header for new ledgers; the first column is intentionally unnamed.
LEDGER_HEADER = ',"Start","End","Icon","Project/Area Link","Total"\n'


def _quote(value: str) -> str:
    # The reader has no quote escaping, so embedded quotes would split fields.
    return '"' + value.replace('"', "'") + '"'


def format_line(session: PomodoroSession, log_format: LogFormat) -> str:
    """Build one ledger line in the shape the file already uses.

    - leading blank + icon column: blank, start, end, icon, name, duration
    - leading blank only: blank, start, end, name, duration
    - otherwise: start, end, name, duration
    """
    start = _quote(session.start_time.strftime(log_format.date_format))
    end = _quote(session.end_time.strftime(log_format.date_format))
    name = _quote(session.goal.name)
    duration = _quote(str(session.duration_seconds))

    if log_format.has_leading_blank_column and log_format.has_icon_column:
        fields = ["", start, end, _quote(session.goal.emoji), name, duration]
    elif log_format.has_leading_blank_column:
        fields = ["", start, end, name, duration]
    else:
        fields = [start, end, name, duration]

    return ",".join(fields) + "\n"


def _ends_with_newline(path: Path) -> bool:
    with open(path, "rb") as f:
        f.seek(0, os.SEEK_END)
        if f.tell() == 0:
            return True
        f.seek(-1, os.SEEK_END)
        return f.read(1) == b"\n"


class PomodoroLedger:
    """Writes finished pomodoros to the ledger CSV.

    Every append re-detects the file's format from its header, so the
    ledger can be shared with tools that expect an older 4- or 5-column
    layout. Appends from one ledger instance never interleave.

    Usage:
        ledger = PomodoroLedger(config, picker)
        try:
            await ledger.record(session)
        except LedgerWriteError as e:
            await ledger.retry_elsewhere(e.session)
    """

    def __init__(
        self,
        config: Config,
        picker: FilePicker | None = None,
        detector: LogFormatDetector | None = None,
    ):
        self.config = config
        self.picker = picker
        self.detector = detector or LogFormatDetector()
        self._lock = threading.Lock()

    def append(self, session: PomodoroSession, path: Path) -> LogFormat:
        """Append one session to the ledger at path (blocking).

        Returns the format the line was written in.
        """
        with self._lock:
            try:
                if not path.exists():
                    path.parent.mkdir(parents=True, exist_ok=True)
                    with open(path, "w", encoding="utf-8", newline="") as f:
                        f.write(LEDGER_HEADER)
                    logger.info(f"Created new pomodoro log with 6-column header: {path}")

                log_format = self.detector.detect(path) or DEFAULT_LOG_FORMAT
                line = format_line(session, log_format)
                needs_newline = not _ends_with_newline(path)

                with open(path, "a", encoding="utf-8", newline="") as f:
                    if needs_newline:
                        f.write("\n")
                    f.write(line)
            except OSError as e:
                logger.error(f"Error saving pomodoro to {path}: {e}")
                raise LedgerWriteError(session, path, e) from e

        logger.info(
            f"Appended pomodoro for {session.goal.label} to {path} "
            f"using {log_format.column_count}-column format"
        )
        return log_format

    async def resolve_location(self) -> Path | None:
        """Return the remembered ledger, or ask the picker for one."""
        remembered = self.config.location_for(FilePurpose.LEDGER)
        if remembered is not None and remembered.is_file():
            return remembered

        if remembered is not None:
            logger.warning(f"Saved pomodoro log is no longer available: {remembered}")
        return await self._pick_location()

    async def record(self, session: PomodoroSession) -> Path | None:
        """Append a session to the resolved ledger without blocking the loop.

        Returns the path written, or None if no location was chosen.
        Raises LedgerWriteError if the write fails.
        """
        path = await self.resolve_location()
        if path is None:
            logger.warning(f"No pomodoro log selected, session for {session.goal.label} not saved")
            return None

        await asyncio.to_thread(self.append, session, path)
        return path

    async def retry_elsewhere(self, session: PomodoroSession) -> Path | None:
        """Pick a new ledger location and append the same session there."""
        path = await self._pick_location()
        if path is None:
            return None

        await asyncio.to_thread(self.append, session, path)
        return path

    async def _pick_location(self) -> Path | None:
        if self.picker is None:
            return None

        try:
            chosen = await self.picker.pick_file(FilePurpose.LEDGER)
        except Exception as e:
            logger.warning(f"Pomodoro log picker failed: {e}")
            return None

        if chosen is None:
            return None

        try:
            await asyncio.to_thread(self.config.remember_location, FilePurpose.LEDGER, chosen)
            logger.info(f"Saved pomodoro log location: {chosen}")
        except OSError as e:
            logger.warning(f"Could not save pomodoro log location: {e}")
        return Path(chosen)
