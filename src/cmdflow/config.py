"""Configuration management for cmdflow."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CMDFLOW_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Preferences
    prefs_dir: Path = Field(default=Path.home() / ".cmdflow", description="Directory holding user preferences")
    commands_file_name: str = Field(default="command_prefs.json", description="File name of the custom commands list")

    # Reporting
    status_output_len: int = Field(default=80, description="Leading output characters passed to the status setter")

    # Filtering
    vcs_systems: list[str] = Field(default_factory=lambda: ["Git", "SVN"], description="Known version control names")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")

    @property
    def commands_path(self) -> Path:
        return self.prefs_dir.expanduser() / self.commands_file_name


def load_settings(project: Path | None = None) -> Settings:
    """Load settings, reading ``<project>/.env`` when a project is given."""

    if project is None:
        return Settings()
    env_file = project / ".env"
    return Settings(_env_file=env_file if env_file.is_file() else None)  # type: ignore[call-arg]
