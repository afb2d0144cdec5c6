"""Adapters that project the timer to widgets and notifications."""

from pomolog.widget.notifier import ConsoleNotifier, MacNotifier, NullNotifier, get_notifier
from pomolog.widget.status_mirror import StatusFileMirror, read_status

__all__ = [
    "ConsoleNotifier",
    "MacNotifier",
    "NullNotifier",
    "get_notifier",
    "StatusFileMirror",
    "read_status",
]
