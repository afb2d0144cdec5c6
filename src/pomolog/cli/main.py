"""CLI commands for pomolog using Typer."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt
from rich.table import Table

from pomolog import __version__
from pomolog.core.config import Config, TimerConfig
from pomolog.core.errors import LedgerWriteError, TimerStateError
from pomolog.focus.models import Goal, PomodoroSession
from pomolog.focus.pomodoro import TimerEngine, TimerPhase, TimerState

app = typer.Typer(
    name="pomolog",
    help="Pomodoro timer that logs focus sessions against your goals.",
    add_completion=False,
)

console = Console()

CONTROL_ACTIONS = ("pause", "resume", "finish", "reset", "stop")

# Set by the main callback
_config_path: Path | None = None


def setup_logging(log_level: str, log_file: Path | None = None) -> None:
    """Configure logging for the application."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )

    logging.getLogger("asyncio").setLevel(logging.WARNING)


def load_config() -> Config:
    """Load configuration from the --config path or the default location."""
    return Config.load(_config_path)


def write_timer_control(control_file: Path, action: str) -> None:
    """Write a control command for the running timer."""
    control_file.parent.mkdir(parents=True, exist_ok=True)
    control_file.write_text(json.dumps({"action": action, "timestamp": datetime.now().isoformat()}))


def read_timer_control(control_file: Path) -> dict | None:
    """Read and clear the control command."""
    if not control_file.exists():
        return None
    try:
        data = json.loads(control_file.read_text())
        control_file.unlink()  # Clear after reading
        return data
    except (OSError, ValueError):
        return None


async def follow_timer_control(
    engine: TimerEngine,
    control_file: Path,
    on_poll: Callable[[TimerState], None] | None = None,
    poll_seconds: float = 0.5,
) -> None:
    """Apply control-file commands to the engine until it is idle again."""
    while engine.state.phase is not TimerPhase.IDLE:
        # Commands wait until a finished session has been written.
        ctrl = None if engine.is_finishing else read_timer_control(control_file)
        if ctrl:
            action = ctrl.get("action")
            if action == "pause":
                await engine.pause()
            elif action == "resume":
                await engine.start()
            elif action in ("finish", "stop"):
                await engine.finish_early()
            elif action == "reset":
                await engine.reset()

        if on_poll is not None:
            on_poll(engine.state)
        await asyncio.sleep(poll_seconds)


def _goals_table(goals: list[Goal]) -> Table:
    table = Table(title="Goals", show_header=True, header_style="bold cyan")
    table.add_column("#")
    table.add_column("Goal")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Priority", justify="right")
    table.add_column("Context")
    table.add_column("Due")

    for number, g in enumerate(goals, start=1):
        table.add_row(
            str(number),
            g.label,
            g.type or "-",
            g.status or "-",
            f"{g.priority:g}",
            g.context or "-",
            g.due or "-",
        )
    return table


def _build_engine(config: Config) -> TimerEngine:
    from pomolog.cli.picker import PromptFilePicker
    from pomolog.storage.goal_store import GoalStore
    from pomolog.storage.ledger import PomodoroLedger
    from pomolog.widget.notifier import get_notifier
    from pomolog.widget.status_mirror import StatusFileMirror

    picker = PromptFilePicker(console)
    ledger = PomodoroLedger(config, picker)
    engine = TimerEngine(
        ledger=ledger,
        goal_store=GoalStore(config, picker),
        mirror=StatusFileMirror(config.status_file),
        notifier=get_notifier(config.notifications, console),
        config=config.timer,
    )

    async def offer_retry(session: PomodoroSession, error: LedgerWriteError) -> None:
        console.print(f"\n[red]Error saving pomodoro: {error}[/red]")
        if not await asyncio.to_thread(Confirm.ask, "Select a different log file and retry?", console=console):
            return
        try:
            path = await ledger.retry_elsewhere(session)
        except LedgerWriteError as e:
            console.print(f"[red]Still could not save: {e}[/red]")
            return
        if path:
            console.print(f"[green]Saved to {path}[/green]")

    engine.on_write_failure = offer_retry
    return engine


@app.command()
def goals() -> None:
    """List goals from the goals CSV."""
    config = load_config()

    async def load():
        engine = _build_engine(config)
        return await engine.load_goals()

    loaded = asyncio.run(load())
    console.print(_goals_table(loaded))


@app.command()
def run(
    goal: int = typer.Option(
        None,
        "--goal",
        "-g",
        help="Goal number as shown by 'pomolog goals'",
    ),
    minutes: int = typer.Option(
        None,
        "--minutes",
        "-m",
        min=1,
        max=120,
        help="Pomodoro length in minutes",
    ),
) -> None:
    """Run a pomodoro in the foreground.

    Examples:
        pomolog run -g 2 -m 50
        pomolog run  # Interactive mode

    Control it from another terminal with 'pomolog timer pause|resume|finish|reset'.
    Ctrl+C finishes the pomodoro early.
    """
    config = load_config()
    config.ensure_directories()

    async def run_timer():
        engine = _build_engine(config)
        loaded = await engine.load_goals()

        number = goal
        if number is None:
            console.print(_goals_table(loaded))
            number = await asyncio.to_thread(IntPrompt.ask, "Goal", default=1, console=console)

        try:
            engine.select_goal(number - 1)
            if minutes:
                engine.set_length(minutes)
        except (IndexError, ValueError, TimerStateError) as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

        selected = engine.selected_goal
        console.print(f"\n[green]Starting pomodoro:[/green] {selected.label}")
        console.print(f"  Length: {engine.state.pomodoro_length_minutes} minutes")
        console.print("Press Ctrl+C to finish early\n")

        def show_status(state: TimerState) -> None:
            label = "⏸ " if state.phase is TimerPhase.PAUSED else "🍅"
            sys.stdout.write(f"\r{label} {state.time_display} | {selected.label}    ")
            sys.stdout.flush()

        read_timer_control(config.control_file)  # drop stale commands
        await engine.start()

        try:
            await follow_timer_control(engine, config.control_file, show_status)
        except asyncio.CancelledError:
            console.print("\n\n[yellow]Finishing pomodoro...[/yellow]")
            if await engine.finish_early():
                console.print("[green]Pomodoro logged[/green]")
            else:
                console.print("[dim]Less than a minute, not logged[/dim]")

    try:
        asyncio.run(run_timer())
    except KeyboardInterrupt:
        pass


@app.command()
def timer(
    action: str = typer.Argument(..., help="Action: pause, resume, finish, reset"),
) -> None:
    """Control the running pomodoro (pause, resume, finish, reset)."""
    if action == "start":
        action = "resume"

    if action not in CONTROL_ACTIONS:
        console.print(f"[red]Unknown action: {action}[/red]")
        console.print("Valid actions: pause, resume, finish, reset")
        raise typer.Exit(1)

    config = load_config()
    write_timer_control(config.control_file, action)
    console.print(f"[green]Sent {action} command[/green]")


@app.command()
def status() -> None:
    """Show the running pomodoro."""
    from pomolog.widget.status_mirror import read_status

    config = load_config()
    current = read_status(config.status_file)

    if not current.get("active"):
        console.print("[dim]No pomodoro running[/dim]")
        return

    state = "[green]Running[/green]" if current.get("timer_running") else "[yellow]Paused[/yellow]"
    goal_label = f"{current.get('goal_emoji', '')} {current.get('goal_name', '')}".strip() or "-"
    console.print(
        Panel(
            f"{goal_label}\n{current.get('time_remaining', '--:--')}  {state}",
            title="Pomodoro",
            expand=False,
        )
    )


@app.command(name="config")
def config_command(
    goals_file: Path = typer.Option(None, "--goals", help="Goals CSV to load"),
    ledger_file: Path = typer.Option(None, "--ledger", help="Pomodoro log CSV to append to"),
    minutes: int = typer.Option(None, "--minutes", "-m", min=1, max=120, help="Default pomodoro length"),
) -> None:
    """Show or change remembered file locations and defaults."""
    config = load_config()

    if goals_file or ledger_file or minutes:
        if goals_file:
            config.goals_file = goals_file.expanduser()
        if ledger_file:
            config.ledger_file = ledger_file.expanduser()
        if minutes:
            config.timer = TimerConfig(pomodoro_minutes=minutes, tick_seconds=config.timer.tick_seconds)
        config.save()
        console.print(f"[green]Saved configuration to {config.config_file}[/green]")

    table = Table(title="pomolog configuration", show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("Goals file", str(config.goals_file or "-"))
    table.add_row("Log file", str(config.ledger_file or "-"))
    table.add_row("Pomodoro length", f"{config.timer.pomodoro_minutes} minutes")
    table.add_row("Config file", str(config.config_file))
    table.add_row("Status file", str(config.status_file))
    console.print(table)


@app.command()
def log(
    goal_name: str = typer.Argument(..., help="Goal the pomodoro was for"),
    minutes: int = typer.Option(25, "--minutes", "-m", min=1, help="Length of the pomodoro"),
    emoji: str = typer.Option("", "--emoji", "-e", help="Goal emoji"),
) -> None:
    """Log a pomodoro that ended just now."""
    from pomolog.cli.picker import PromptFilePicker
    from pomolog.storage.ledger import PomodoroLedger

    config = load_config()
    end = datetime.now().replace(microsecond=0)
    session = PomodoroSession(
        goal=Goal(name=goal_name, emoji=emoji),
        start_time=end - timedelta(minutes=minutes),
        end_time=end,
        duration_seconds=minutes * 60,
    )
    ledger = PomodoroLedger(config, PromptFilePicker(console))

    try:
        path = asyncio.run(ledger.record(session))
    except LedgerWriteError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if path is None:
        console.print("[yellow]No log file selected, nothing saved[/yellow]")
        raise typer.Exit(1)
    console.print(f"[green]Logged {minutes} minute pomodoro for {session.goal.label} to {path}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"pomolog v{__version__}")


@app.callback()
def main_callback(
    config_file: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: ~/.config/pomolog/config.yaml)",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """pomolog - Pomodoro timer that logs focus sessions against your goals."""
    global _config_path
    _config_path = config_file

    config = load_config()
    setup_logging(log_level or config.log_level, config.log_dir / "pomolog.log")


if __name__ == "__main__":
    app()
