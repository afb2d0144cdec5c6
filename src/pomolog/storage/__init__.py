"""Goal file loading and pomodoro ledger persistence."""

from pomolog.storage.csv_parser import parse_line, split_lines
from pomolog.storage.goal_schema import ColumnMapping, GoalSchemaDetector
from pomolog.storage.goal_store import GoalStore
from pomolog.storage.ledger import LEDGER_HEADER, PomodoroLedger
from pomolog.storage.log_format import DEFAULT_LOG_FORMAT, LogFormat, LogFormatDetector

__all__ = [
    "parse_line",
    "split_lines",
    "ColumnMapping",
    "GoalSchemaDetector",
    "GoalStore",
    "LEDGER_HEADER",
    "PomodoroLedger",
    "DEFAULT_LOG_FORMAT",
    "LogFormat",
    "LogFormatDetector",
]
