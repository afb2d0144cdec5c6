"""Tests for configuration loading and remembered locations."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from pomolog.core.config import Config, TimerConfig
from pomolog.focus.collaborators import FilePurpose


def test_defaults() -> None:
    config = Config()
    assert config.timer.pomodoro_minutes == 25
    assert config.goals_file is None
    assert config.ledger_file is None
    assert config.status_file.name == "timer_status.json"


def test_timer_length_bounds() -> None:
    with pytest.raises(ValidationError):
        TimerConfig(pomodoro_minutes=0)
    with pytest.raises(ValidationError):
        TimerConfig(pomodoro_minutes=121)
    assert TimerConfig(pomodoro_minutes=120).pomodoro_minutes == 120


def test_remembered_locations_survive_reload(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config = Config.load(config_path)

    config.remember_location(FilePurpose.GOALS, tmp_path / "goals.csv")
    config.remember_location(FilePurpose.LEDGER, tmp_path / "pomos.csv")

    reloaded = Config.load(config_path)
    assert reloaded.goals_file == tmp_path / "goals.csv"
    assert reloaded.ledger_file == tmp_path / "pomos.csv"
    assert reloaded.location_for(FilePurpose.LEDGER) == tmp_path / "pomos.csv"


def test_saved_file_is_private_yaml(tmp_path: Path) -> None:
    config = Config(config_dir=tmp_path, timer=TimerConfig(pomodoro_minutes=50))
    config.save()

    data = yaml.safe_load(config.config_file.read_text())
    assert data["timer"]["pomodoro_minutes"] == 50
    assert "goals_file" not in data
    assert stat.S_IMODE(config.config_file.stat().st_mode) == 0o600


def test_environment_overrides_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("POMOLOG_TIMER__POMODORO_MINUTES", "45")
    monkeypatch.setenv("POMOLOG_LEDGER_FILE", str(tmp_path / "env.csv"))

    config = Config.load(tmp_path / "missing.yaml")

    assert config.timer.pomodoro_minutes == 45
    assert config.ledger_file == tmp_path / "env.csv"


def test_environment_overrides_saved_file(monkeypatch, tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    Config.load(config_path).remember_location(FilePurpose.GOALS, tmp_path / "goals.csv")
    assert yaml.safe_load(config_path.read_text())["timer"]["pomodoro_minutes"] == 25

    monkeypatch.setenv("POMOLOG_TIMER__POMODORO_MINUTES", "50")
    reloaded = Config.load(config_path)

    assert reloaded.timer.pomodoro_minutes == 50
    assert reloaded.timer.tick_seconds == 1.0
    assert reloaded.goals_file == tmp_path / "goals.csv"
