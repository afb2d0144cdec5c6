"""Configuration management with Pydantic and YAML support."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, Field, PrivateAttr
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

if TYPE_CHECKING:
    from pomolog.focus.collaborators import FilePurpose


class TimerConfig(BaseModel):
    """Pomodoro timer configuration."""

    pomodoro_minutes: int = Field(default=25, ge=1, le=120)
    tick_seconds: float = Field(default=1.0, gt=0, description="Countdown granularity")


class NotificationConfig(BaseModel):
    """Completion notification configuration."""

    enabled: bool = True
    backend: str = Field(default="console", pattern="^(console|macos)$")


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="POMOLOG_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / "Library/Application Support/Pomolog"
    )
    log_dir: Path = Field(default_factory=lambda: Path.home() / "Library/Logs/Pomolog")
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config/pomolog")

    # Log level
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # Remembered file locations
    goals_file: Path | None = Field(default=None, description="Goal list CSV")
    ledger_file: Path | None = Field(default=None, description="Pomodoro log CSV")

    # Sub-configurations
    timer: TimerConfig = Field(default_factory=TimerConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)

    _source_path: Path | None = PrivateAttr(default=None)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML values arrive as init kwargs; env must still win over them.
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @property
    def status_file(self) -> Path:
        """Path to the JSON status file read by external widgets."""
        return self.data_dir / "timer_status.json"

    @property
    def control_file(self) -> Path:
        """Path to the JSON control file used by `pomolog timer`."""
        return self.data_dir / "timer_control.json"

    @property
    def config_file(self) -> Path:
        """Path to YAML config file."""
        return self._source_path or self.config_dir / "config.yaml"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def location_for(self, purpose: FilePurpose) -> Path | None:
        """Return the remembered location for a file purpose."""
        return getattr(self, f"{purpose.value}_file")

    def remember_location(self, purpose: FilePurpose, path: Path) -> None:
        """Remember a file location and persist it for future runs."""
        setattr(self, f"{purpose.value}_file", Path(path))
        self.save()

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from YAML file, environment variables, and defaults.

        Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values
        """
        config_path = config_path or Path.home() / ".config/pomolog/config.yaml"

        # Load YAML file if exists
        yaml_config: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}

        config = cls(**yaml_config)
        config._source_path = config_path
        return config

    def save(self, config_path: Path | None = None) -> None:
        """Save current configuration to YAML file."""
        config_path = config_path or self.config_file
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="json", exclude_none=True)

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

        os.chmod(config_path, 0o600)

