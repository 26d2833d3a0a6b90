"""
Module for managing project configuration.
"""

import json
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import (
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_LOCALE,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_TIME_ZONE,
    DEFAULT_WORKSPACE_DIR,
)
from .exceptions import ConfigurationError
from .security import is_valid_notion_id

# --- Configuration ---
CONFIG_FILE = os.getenv("NOTION_CONFIG_FILE", "config.json")

# setting name -> (environment variable, config file key)
_SETTINGS_SOURCES = {
    "token": ("NOTION_TOKEN", "notion_token"),
    "space_id": ("NOTION_SPACE_ID", "space_id"),
    "user_id": ("NOTION_USER_ID", "user_id"),
    "export_format": ("NOTION_EXPORT_FORMAT", "export_format"),
    "locale": ("NOTION_EXPORT_LOCALE", "locale"),
    "time_zone": ("NOTION_EXPORT_TIMEZONE", "time_zone"),
    "poll_interval": ("NOTION_POLL_INTERVAL", "poll_interval"),
    "export_timeout": ("NOTION_EXPORT_TIMEOUT", "export_timeout"),
    "workspace_dir": ("NOTION_WORKSPACE_DIR", "workspace_dir"),
}

_REQUIRED = ("token", "space_id", "user_id")


@dataclass(frozen=True)
class ExportSettings:
    """Everything a run needs, resolved once at startup."""

    token: str
    space_id: str
    user_id: str
    export_format: str = DEFAULT_EXPORT_FORMAT
    locale: str = DEFAULT_LOCALE
    time_zone: str = DEFAULT_TIME_ZONE
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    export_timeout: Optional[float] = None
    workspace_dir: Path = Path(DEFAULT_WORKSPACE_DIR)

    @property
    def archive_path(self) -> Path:
        """Temporary archive location, next to the workspace directory."""
        return self.workspace_dir.with_name(f"{self.workspace_dir.name}.zip")


def _read_config_file(config_file: str) -> Dict[str, Any]:
    config_path = Path(config_file)
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Error parsing JSON file: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration file '{config_file}' must contain a JSON object.")
    return config


def _to_seconds(name: str, value: Any, positive: bool = False) -> float:
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid value for {name}: {value!r} is not a number.")
    if positive and seconds <= 0:
        raise ConfigurationError(f"Invalid value for {name}: {value!r} must be greater than zero.")
    if seconds < 0:
        raise ConfigurationError(f"Invalid value for {name}: {value!r} must not be negative.")
    return seconds


def validate_workspace_dir(workspace_dir: Path) -> Path:
    """
    Make sure the workspace can be wiped without touching anything else.

    Raises:
        ConfigurationError: If the directory has no name of its own or is
            the current directory or one of its parents
    """
    if not workspace_dir.name or workspace_dir.name == "..":
        raise ConfigurationError(f"Workspace directory '{workspace_dir}' must name a dedicated directory.")

    resolved = workspace_dir.resolve()
    cwd = Path.cwd().resolve()
    if resolved == cwd or resolved in cwd.parents:
        raise ConfigurationError(
            f"Workspace directory '{workspace_dir}' contains the current directory and cannot be wiped."
        )
    return workspace_dir


def load_config(config_file: Optional[str] = None) -> ExportSettings:
    """
    Load configuration from environment variables or a JSON file.

    Environment variables win over the configuration file, which is only
    consulted for values the environment does not provide.

    Args:
        config_file: Path of the JSON configuration file (default: CONFIG_FILE)

    Returns:
        ExportSettings: Resolved settings

    Raises:
        ConfigurationError: If configuration is invalid or missing
    """
    values = {name: os.getenv(env_var) for name, (env_var, _) in _SETTINGS_SOURCES.items()}

    if not all(values.values()):
        file_config = _read_config_file(config_file or CONFIG_FILE)
        for name, (_, key) in _SETTINGS_SOURCES.items():
            if not values[name] and file_config.get(key) not in (None, ""):
                values[name] = file_config[key]

    missing = [_SETTINGS_SOURCES[name][0] for name in _REQUIRED if not values[name]]
    if missing:
        raise ConfigurationError(
            f"Environment variable {', '.join(missing)} is missing. "
            "Check the README.md for more information."
        )

    settings = {name: str(values[name]) for name in _REQUIRED}
    for name in ("space_id", "user_id"):
        if not is_valid_notion_id(settings[name].lower()):
            raise ConfigurationError(
                f"{_SETTINGS_SOURCES[name][0]} is not a valid Notion ID: {settings[name]!r}"
            )

    for name in ("export_format", "locale", "time_zone"):
        if values[name]:
            settings[name] = values[name]
    if values["poll_interval"] not in (None, ""):
        settings["poll_interval"] = _to_seconds("poll_interval", values["poll_interval"], positive=True)
    if values["export_timeout"] not in (None, ""):
        timeout = _to_seconds("export_timeout", values["export_timeout"])
        # 0 keeps the poll loop unbounded
        settings["export_timeout"] = timeout or None
    if values["workspace_dir"]:
        settings["workspace_dir"] = Path(values["workspace_dir"])
    validate_workspace_dir(settings.get("workspace_dir", Path(DEFAULT_WORKSPACE_DIR)))

    return ExportSettings(**settings)


def prepare_workspace(settings: ExportSettings) -> Path:
    """Delete and recreate the workspace directory for a fresh run."""
    workspace = validate_workspace_dir(settings.workspace_dir)
    try:
        if workspace.exists():
            shutil.rmtree(workspace)
        workspace.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(f"Unable to prepare workspace directory '{workspace}': {e}") from e
    return workspace
