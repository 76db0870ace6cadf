"""
Display Config Service - load, validate and save calendars.json.

The file is small and edited rarely (from the admin API), so every call
reads or writes it directly; there is no in-memory cache to go stale.

Usage:
    from app.services.display_config import display_config_store

    config = display_config_store.load()
    config.display.week_start  # feeds the grid builder
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from app.core.config import settings
from app.schemas.config import DisplayConfig


logger = logging.getLogger("wallcal.services.display_config")


class ConfigError(Exception):
    """Raised when the display configuration is unreadable or invalid."""
    pass


def validate_config(payload: Any) -> DisplayConfig:
    """
    Validate a raw configuration payload.

    Every calendar needs a non-empty id, name and color; the display block
    needs an integer week start in 0..6, a language and a timezone.

    Raises:
        ConfigError: With the first validation problem as message
    """
    if not isinstance(payload, dict):
        raise ConfigError("Configuration must be a JSON object")
    if not isinstance(payload.get("calendars"), list):
        raise ConfigError("'calendars' must be a list")
    if not isinstance(payload.get("display"), dict):
        raise ConfigError("'display' must be an object")

    week_start = payload["display"].get("weekStart", payload["display"].get("week_start"))
    if isinstance(week_start, bool) or not isinstance(week_start, (int, float)):
        raise ConfigError("'display.weekStart' must be a number")

    try:
        return DisplayConfig.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ConfigError(f"Invalid configuration at '{location}': {first['msg']}")


class DisplayConfigStore:
    """
    JSON file store for the display configuration.

    A missing file is created with the default configuration on first load.
    """

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Path:
        return self._path or settings.config_path

    def load(self) -> DisplayConfig:
        """
        Read the configuration.

        Raises:
            ConfigError: If the file exists but cannot be read or is invalid
        """
        if not self.path.exists():
            logger.info("Config file not found, creating default configuration")
            config = DisplayConfig()
            self.save(config)
            return config

        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load config from {self.path}: {e}")
            raise ConfigError("Failed to load configuration")

        return validate_config(payload)

    def save(self, config: DisplayConfig) -> None:
        """
        Write the configuration as pretty-printed JSON.

        Raises:
            ConfigError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(config.model_dump(by_alias=True), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except OSError as e:
            logger.error(f"Failed to save config to {self.path}: {e}")
            raise ConfigError("Failed to save configuration")

        logger.info("Configuration saved successfully")


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
display_config_store = DisplayConfigStore()
