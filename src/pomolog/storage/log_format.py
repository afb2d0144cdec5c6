"""Detects the column layout of an existing pomodoro ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pomolog.storage.csv_parser import parse_line, split_lines

logger = logging.getLogger(__name__)

# yyyy-MM-dd HH:mm:ss
ISO_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
# MM/dd/yyyy HH:mm:ss
US_DATE_FORMAT = "%m/%d/%Y %H:%M:%S"

# Only the head of the file is read; ledgers grow without bound.
PREFIX_BYTES = 1000

ICON_HEADERS = {"icon", "emoji"}


@dataclass(frozen=True)
class LogFormat:
    """Shape of a ledger file as declared by its header row."""
    column_count: int
    has_leading_blank_column: bool
    has_icon_column: bool
    date_format: str = ISO_DATE_FORMAT


DEFAULT_LOG_FORMAT = LogFormat(
    column_count=6,
    has_leading_blank_column=True,
    has_icon_column=True,
    date_format=ISO_DATE_FORMAT,
)


class LogFormatDetector:
    """Infers a LogFormat from the header and first data row of a ledger.

    The file is re-read on every call so hand-edited or externally
    written ledgers are always appended to in their current shape.
    """

    def __init__(self, prefix_bytes: int = PREFIX_BYTES):
        self.prefix_bytes = prefix_bytes

    def detect(self, path: Path) -> LogFormat | None:
        """Return the file's format, or None if it is empty or unreadable."""
        try:
            with open(path, "rb") as f:
                data = f.read(self.prefix_bytes)
        except OSError as e:
            logger.warning(f"Error detecting file format: {e}")
            return None

        if not data:
            return None

        # The prefix may end in the middle of a multi-byte character.
        content = data.decode("utf-8-sig", errors="ignore")
        return self.detect_from_text(content)

    def detect_from_text(self, content: str) -> LogFormat | None:
        lines = split_lines(content)
        if not lines or not lines[0]:
            return None

        header = parse_line(lines[0])
        has_leading_blank = header[0].strip() == ""
        has_icon = any(field.strip().lower() in ICON_HEADERS for field in header)

        date_format = ISO_DATE_FORMAT
        if len(lines) > 1:
            fields = parse_line(lines[1])
            if len(fields) > 1 and "/" in fields[1].strip():
                date_format = US_DATE_FORMAT

        log_format = LogFormat(
            column_count=len(header),
            has_leading_blank_column=has_leading_blank,
            has_icon_column=has_icon,
            date_format=date_format,
        )
        logger.debug(f"Detected ledger format: {log_format}")
        return log_format
