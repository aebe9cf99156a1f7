"""Central configuration loaded from environment variables and an optional YAML file."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".config" / "2fa"
CONFIG_FILE_NAME = "config.yaml"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TWOFA_", env_file=".env", env_file_encoding="utf-8", extra="ignore",
    )

    # Storage
    data_dir: Path = Field(default_factory=lambda: DEFAULT_DATA_DIR)
    data_file_name: str = "accounts.json"

    # Watch mode
    watch_interval: float = 1.0

    # Desktop integration
    selector_command: list[str] = Field(
        default_factory=lambda: ["dmenu", "-i", "-p", "Select 2FA Account:"],
    )
    clipboard_commands: list[list[str]] = Field(
        default_factory=lambda: [
            ["xclip", "-selection", "clipboard"],
            ["xsel", "--clipboard", "--input"],
            ["pbcopy"],
            ["wl-copy"],
        ],
    )

    # Logging
    log_level: str = "WARNING"

    @property
    def data_file(self) -> Path:
        return self.data_dir / self.data_file_name


def load_file_config(path: Path) -> dict[str, Any]:
    """Load the optional YAML config file. Missing file means no overrides."""
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def load_settings(**overrides: Any) -> Settings:
    """Build settings: YAML file values first, then environment, then overrides.

    The YAML file lives in the data directory, so the directory itself is
    resolved from the environment before the file is read.
    """
    base = Settings(**overrides)
    file_values = load_file_config(base.data_dir / CONFIG_FILE_NAME)
    if not file_values:
        return base
    logger.debug("Loaded %d settings from %s", len(file_values), base.data_dir / CONFIG_FILE_NAME)
    env_keys = {
        name for name in Settings.model_fields
        if f"TWOFA_{name}".upper() in os.environ
    }
    merged = {k: v for k, v in file_values.items() if k not in env_keys}
    merged.update(overrides)
    return Settings(**merged)


def ensure_data_dir(settings: Settings) -> Path:
    """Create the data directory with owner-only permissions."""
    settings.data_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    return settings.data_dir
