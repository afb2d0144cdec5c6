"""Column detection for goal CSV files of unknown layout."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from pomolog.storage.csv_parser import parse_line

logger = logging.getLogger(__name__)

# How many leading rows may hold the header.
HEADER_SCAN_ROWS = 5
# Data rows are searched for in rows 1..14.
DATA_SCAN_ROWS = 15

NAME_TOKEN = "name"

# Header token -> ColumnMapping attribute. Emoji is positional only.
HEADER_TOKENS: dict[str, str] = {
    "name": "name",
    "type": "type",
    "status": "status",
    "priority": "priority",
    "context": "context",
    "due": "due",
}


@dataclass(frozen=True)
class ColumnMapping:
    """Column index of each goal field.

    The defaults follow the usual export layout: a leading blank column,
    then emoji, name, type, status, priority, context and due.
    """
    emoji: int = 1
    name: int = 2
    type: int = 3
    status: int = 4
    priority: int = 5
    context: int = 6
    due: int = 7
    header_row: int | None = None

    @property
    def required_width(self) -> int:
        """Minimum field count for a row to be read as a goal.

        The emoji column is optional and does not count.
        """
        return max(self.name, self.type, self.status, self.priority, self.context, self.due) + 1


def is_header_token(value: str) -> bool:
    """True if a name cell just repeats the header label."""
    return value.strip().lower() == NAME_TOKEN


class GoalSchemaDetector:
    """Locates goal columns from header rows, falling back to fixed positions.

    Usage:
        detector = GoalSchemaDetector()
        mapping = detector.detect(lines)
        first_row = detector.find_data_start(lines, mapping)
    """

    def detect(self, lines: list[str]) -> ColumnMapping:
        """Build a column mapping from the first few rows."""
        mapping = ColumnMapping()

        for row_index, line in enumerate(lines[:HEADER_SCAN_ROWS]):
            fields = parse_line(line)
            overrides: dict[str, int] = {}

            for index, field in enumerate(fields):
                attr = HEADER_TOKENS.get(field.strip().lower())
                if attr is not None:
                    overrides[attr] = index
                    logger.debug(f"Found '{field.strip()}' column at index {index} (row {row_index})")

            if overrides:
                mapping = replace(mapping, **overrides)

            if any(NAME_TOKEN in field.lower() for field in fields):
                mapping = replace(mapping, header_row=row_index)
                break

        return mapping

    def find_data_start(self, lines: list[str], mapping: ColumnMapping) -> int:
        """Index of the first row with a usable name, defaulting to 1.

        Row 0 is treated as a header or metadata row, unless no header was
        found at all, in which case it may be data too.
        """
        first_candidate = 0 if mapping.header_row is None else 1

        for row_index in range(first_candidate, min(DATA_SCAN_ROWS, len(lines))):
            fields = parse_line(lines[row_index])
            if len(fields) <= mapping.name:
                continue
            name = fields[mapping.name]
            if name and not is_header_token(name):
                logger.debug(f"Found first data row at index {row_index}")
                return row_index

        return 1
