"""Tests for the pomolog command line."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from pomolog.cli.main import app, follow_timer_control, read_timer_control, write_timer_control
from pomolog.core.config import TimerConfig
from pomolog.focus.models import Goal
from pomolog.focus.pomodoro import TimerEngine, TimerPhase
from pomolog.storage.csv_parser import parse_line

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    goals = tmp_path / "goals.csv"
    goals.write_text(
        ",Icon,Name,Type,Status,Priority,Context,Due\n"
        ",📚,Read Book,Project,Active,2,Personal,2025-01-01\n",
        encoding="utf-8",
    )
    ledger = tmp_path / "pomos.csv"
    ledger.write_text(',"Start","End","Project/Area Link","Total"\n', encoding="utf-8")

    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "data_dir": str(tmp_path / "data"),
                "log_dir": str(tmp_path / "logs"),
                "config_dir": str(tmp_path),
                "goals_file": str(goals),
                "ledger_file": str(ledger),
            }
        )
    )
    return path


def test_goals_lists_file_contents(config_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(config_path), "goals"])
    assert result.exit_code == 0
    assert "Read Book" in result.output


def test_log_appends_in_existing_shape(config_path: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(config_path), "log", "Read Book", "--minutes", "25"])

    assert result.exit_code == 0
    last = (tmp_path / "pomos.csv").read_text(encoding="utf-8").splitlines()[-1]
    fields = parse_line(last)
    assert len(fields) == 5
    assert fields[3] == "Read Book"
    assert fields[4] == "1500"


def test_config_sets_locations(config_path: Path, tmp_path: Path) -> None:
    new_ledger = tmp_path / "other.csv"
    result = runner.invoke(
        app, ["--config", str(config_path), "config", "--ledger", str(new_ledger), "--minutes", "50"]
    )

    assert result.exit_code == 0
    saved = yaml.safe_load(config_path.read_text())
    assert saved["ledger_file"] == str(new_ledger)
    assert saved["timer"]["pomodoro_minutes"] == 50


def test_timer_writes_control_file(config_path: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(config_path), "timer", "pause"])

    assert result.exit_code == 0
    assert read_timer_control(tmp_path / "data" / "timer_control.json")["action"] == "pause"


def test_timer_rejects_unknown_action(config_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(config_path), "timer", "explode"])
    assert result.exit_code == 1


def test_status_reads_mirrored_state(config_path: Path, tmp_path: Path) -> None:
    status_file = tmp_path / "data" / "timer_status.json"
    status_file.parent.mkdir(parents=True)
    status_file.write_text(
        json.dumps(
            {
                "active": True,
                "goal_name": "Read Book",
                "goal_emoji": "📚",
                "time_remaining": "12:34",
                "timer_running": True,
            }
        )
    )

    result = runner.invoke(app, ["--config", str(config_path), "status"])

    assert result.exit_code == 0
    assert "12:34" in result.output
    assert "Read Book" in result.output


def test_status_when_idle(config_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(config_path), "status"])
    assert "No pomodoro running" in result.output


class GatedLedger:
    """Holds every write until the test opens the gate."""

    def __init__(self):
        self.entered = asyncio.Event()
        self.gate = asyncio.Event()
        self.sessions = []

    async def record(self, session):
        self.entered.set()
        await self.gate.wait()
        self.sessions.append(session)
        return Path("ledger.csv")


def test_finish_command_during_completion_keeps_session(clock, tmp_path: Path) -> None:
    control_file = tmp_path / "timer_control.json"

    async def scenario():
        ledger = GatedLedger()
        engine = TimerEngine(
            ledger=ledger,
            config=TimerConfig(pomodoro_minutes=1),
            clock=clock,
            tick_seconds=3600,
        )
        engine.set_goals([Goal(name="Read Book", emoji="📚")])
        await engine.start()
        for _ in range(60):
            await engine.tick()

        completing = asyncio.create_task(engine.tick())
        await ledger.entered.wait()
        assert engine.is_finishing

        write_timer_control(control_file, "finish")
        follower = asyncio.create_task(follow_timer_control(engine, control_file, poll_seconds=0.01))
        await asyncio.sleep(0.05)
        assert not follower.done()

        ledger.gate.set()
        await completing
        await asyncio.wait_for(follower, timeout=1)
        return engine, ledger

    engine, ledger = asyncio.run(scenario())

    assert engine.state.phase is TimerPhase.IDLE
    assert len(ledger.sessions) == 1
    assert ledger.sessions[0].duration_seconds == 60


def test_follow_timer_control_applies_finish(clock, tmp_path: Path) -> None:
    control_file = tmp_path / "timer_control.json"
    seen = []

    async def scenario():
        engine = TimerEngine(config=TimerConfig(pomodoro_minutes=1), clock=clock, tick_seconds=3600)
        engine.set_goals([Goal(name="Read Book")])
        await engine.start()
        write_timer_control(control_file, "finish")
        await asyncio.wait_for(
            follow_timer_control(engine, control_file, seen.append, poll_seconds=0.01), timeout=1
        )
        return engine

    engine = asyncio.run(scenario())

    assert engine.state.phase is TimerPhase.IDLE
    assert not control_file.exists()
    assert seen[-1].phase is TimerPhase.IDLE
