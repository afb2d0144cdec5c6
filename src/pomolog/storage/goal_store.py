"""Loads the goal list from a remembered CSV file."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from pomolog.core.config import Config
from pomolog.core.errors import EmptyOrUnparsableError, FileUnavailableError
from pomolog.focus.collaborators import FilePicker, FilePurpose
from pomolog.focus.models import Goal
from pomolog.storage.csv_parser import parse_line, split_lines
from pomolog.storage.goal_schema import ColumnMapping, GoalSchemaDetector, is_header_token

logger = logging.getLogger(__name__)


def is_accessible_file(path: Path | None) -> bool:
    """True if path points at an existing, readable file."""
    if path is None:
        return False
    try:
        return path.is_file() and os.access(path, os.R_OK)
    except OSError as e:
        logger.warning(f"Path exists but is not accessible: {path}, Error: {e}")
        return False


def _parse_priority(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return 0.0


class GoalStore:
    """Resolves the goal file, reads it, and parses it into goals.

    `load()` never raises: a missing, unreadable, empty or unparsable
    file produces an empty list, and the caller decides on a fallback.

    Usage:
        store = GoalStore(config, picker)
        goals = await store.load()
    """

    def __init__(
        self,
        config: Config,
        picker: FilePicker | None = None,
        detector: GoalSchemaDetector | None = None,
    ):
        self.config = config
        self.picker = picker
        self.detector = detector or GoalSchemaDetector()

    async def resolve_location(self) -> Path | None:
        """Return the remembered goal file, asking the picker if it is gone."""
        remembered = self.config.location_for(FilePurpose.GOALS)
        if is_accessible_file(remembered):
            return remembered

        if remembered is not None:
            logger.warning(f"Saved goals file is no longer available: {remembered}")

        if self.picker is None:
            return None

        try:
            chosen = await self.picker.pick_file(FilePurpose.GOALS)
        except Exception as e:
            logger.warning(f"Goals file picker failed: {e}")
            return None

        if chosen is None:
            logger.info("No goals file selected")
            return None

        try:
            await asyncio.to_thread(self.config.remember_location, FilePurpose.GOALS, chosen)
            logger.info(f"Saved goals file location: {chosen}")
        except OSError as e:
            logger.warning(f"Could not save goals file location: {e}")
        return Path(chosen)

    async def load(self) -> list[Goal]:
        """Load goals from the resolved file. Returns [] on any failure."""
        path = await self.resolve_location()
        if path is None:
            return []

        try:
            goals = await asyncio.to_thread(self.read_goals, path)
        except (FileUnavailableError, EmptyOrUnparsableError) as e:
            logger.warning(f"Could not load goals: {e}")
            return []

        logger.info(f"Successfully parsed {len(goals)} goals from {path}")
        return goals

    def read_goals(self, path: Path) -> list[Goal]:
        """Read and parse a goal file (blocking)."""
        if not path.exists():
            raise FileUnavailableError(path, "file not found")

        try:
            content = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise FileUnavailableError(path, str(e)) from e

        if not content.strip():
            raise EmptyOrUnparsableError(path, "file is empty")

        goals = self.parse_goals(content)
        if not goals:
            raise EmptyOrUnparsableError(path, "no goals could be parsed")
        return goals

    def parse_goals(self, content: str) -> list[Goal]:
        """Parse goal rows out of CSV text."""
        lines = split_lines(content)
        mapping = self.detector.detect(lines)
        data_start = self.detector.find_data_start(lines, mapping)
        logger.debug(f"Goal CSV has {len(lines)} lines, columns {mapping}, data from row {data_start}")

        goals: list[Goal] = []
        for line in lines[data_start:]:
            if not line.strip():
                continue
            goal = self._parse_row(parse_line(line), mapping)
            if goal is not None:
                goals.append(goal)

        return goals

    def _parse_row(self, fields: list[str], mapping: ColumnMapping) -> Goal | None:
        if len(fields) < mapping.required_width:
            return None

        name = fields[mapping.name].strip()
        if not name or is_header_token(name):
            return None

        emoji = fields[mapping.emoji].strip() if len(fields) > mapping.emoji else ""
        return Goal(
            emoji=emoji,
            name=name,
            type=fields[mapping.type].strip(),
            status=fields[mapping.status].strip(),
            priority=_parse_priority(fields[mapping.priority].strip()),
            context=fields[mapping.context].strip(),
            due=fields[mapping.due].strip(),
        )
