"""Terminal file picker used when no remembered location is usable."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from rich.console import Console
from rich.prompt import Prompt

from pomolog.focus.collaborators import FilePurpose
from pomolog.storage.ledger import LEDGER_HEADER

logger = logging.getLogger(__name__)

PROMPTS = {
    FilePurpose.GOALS: "Path to your goals CSV",
    FilePurpose.LEDGER: "Path to your pomodoro log CSV (created if missing)",
}


class PromptFilePicker:
    """FilePicker that asks for a path on the terminal."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    async def pick_file(self, purpose: FilePurpose) -> Path | None:
        answer = await asyncio.to_thread(Prompt.ask, PROMPTS[purpose], default="", console=self.console)
        answer = answer.strip()
        if not answer:
            return None

        path = Path(answer).expanduser()

        if purpose is FilePurpose.GOALS:
            if not path.is_file():
                self.console.print(f"[red]File not found: {path}[/red]")
                return None
            return path

        if not path.exists():
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(LEDGER_HEADER, encoding="utf-8")
                logger.info(f"Created new pomodoro log at {path}")
            except OSError as e:
                self.console.print(f"[red]Could not create {path}: {e}[/red]")
                return None
        return path
