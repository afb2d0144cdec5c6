"""Completion notifiers."""

from __future__ import annotations

import logging
import subprocess
import sys

from rich.console import Console

from pomolog.core.config import NotificationConfig

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """Prints notifications to the terminal."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def notify(self, title: str, body: str) -> None:
        self.console.print(f"\n[bold green]🍅 {title}[/bold green]")
        self.console.print(body)


class MacNotifier:
    """Posts macOS notifications through AppleScript."""

    def notify(self, title: str, body: str) -> None:
        script = f"display notification {_applescript_string(body)} with title {_applescript_string(title)}"
        try:
            result = subprocess.run(
                ["osascript", "-e", script],
                capture_output=True,
                text=True,
                timeout=5,
            )
            if result.returncode != 0:
                logger.warning(f"osascript notification failed: {result.stderr.strip()}")
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Could not post notification: {e}")


class NullNotifier:
    """Drops notifications."""

    def notify(self, title: str, body: str) -> None:
        logger.debug(f"Notification suppressed: {title}")


def _applescript_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def get_notifier(
    config: NotificationConfig, console: Console | None = None
) -> ConsoleNotifier | MacNotifier | NullNotifier:
    """Choose a notifier for the configured backend and platform."""
    if not config.enabled:
        return NullNotifier()
    if config.backend == "macos" and sys.platform == "darwin":
        return MacNotifier()
    return ConsoleNotifier(console)
