"""Global configuration storage for FlowBoard.

Stores user preferences in ~/.flowboard/config.json. Set FLOWBOARD_HOME to
use another directory.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_HOME_ENV = "FLOWBOARD_HOME"


class FlowBoardConfig(BaseModel):
    """User preferences."""

    data_dir: str | None = None
    sweep_interval_seconds: int = Field(default=3600, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    default_export_format: Literal["json", "md"] = "json"


def get_config_dir() -> Path:
    """Get the FlowBoard config directory."""
    override = os.environ.get(CONFIG_HOME_ENV)
    config_dir = Path(override).expanduser() if override else Path.home() / ".flowboard"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config() -> FlowBoardConfig:
    """Load configuration, falling back to defaults if missing or invalid."""
    config_file = get_config_dir() / "config.json"
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            return FlowBoardConfig(**data)
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"Ignoring invalid config file {config_file}: {e}")
    return FlowBoardConfig()


def save_config(config: FlowBoardConfig) -> None:
    """Save configuration."""
    config_file = get_config_dir() / "config.json"
    config_file.write_text(
        json.dumps(config.model_dump(), indent=2),
        encoding="utf-8",
    )


def update_config(config: FlowBoardConfig, key: str, value: Any) -> FlowBoardConfig:
    """Return a copy of config with one field changed and re-validated.

    Raises:
        KeyError: If key is not a config field.
        pydantic.ValidationError: If value is not valid for the field.
    """
    if key not in FlowBoardConfig.model_fields:
        raise KeyError(key)
    return FlowBoardConfig.model_validate({**config.model_dump(), key: value})


def get_data_dir(config: FlowBoardConfig | None = None) -> Path:
    """Directory holding the board store file."""
    config = config or get_config()
    if config.data_dir:
        return Path(config.data_dir).expanduser()
    return get_config_dir()
