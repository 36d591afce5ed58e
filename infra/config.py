"""
Palette Configuration
---------------------
YAML configuration with environment variable overrides.

File layout (all keys optional):

    palette:
      max_recent_commands: 10
      confirm_dangerous_commands: true
      shortcut_overrides:
        file.save: Ctrl+Alt+S
        view.fullscreen: null      # unbind

Environment variables override the file: PALETTE_<KEY>, e.g.
PALETTE_CLOSE_ON_EXECUTE=false.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging
import os

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from core.errors import ValidationError


ENV_PREFIX = "PALETTE_"
SECTION = "palette"


class PaletteConfig(BaseModel):
    """Validated palette settings."""

    model_config = ConfigDict(extra="forbid")

    max_recent_commands: int = Field(10, ge=0, description="Recent commands to list")
    group_by_category: bool = Field(True, description="Group empty-query results by category")
    confirm_dangerous_commands: bool = Field(
        True, description="Hold warning/danger commands until confirmed"
    )
    close_on_execute: bool = Field(True, description="Emit close before running a command")
    shortcuts_enabled: bool = Field(True, description="Resolve keyboard shortcuts")
    max_results: Optional[int] = Field(None, ge=1, description="Cap on search results")
    shortcut_overrides: Dict[str, Optional[str]] = Field(
        default_factory=dict, description="command id -> shortcut (null unbinds)"
    )
    log_level: str = Field("INFO", description="Console log level")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return level


class ConfigManager:
    """
    Loads palette configuration from YAML with environment overrides.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self._config_path = Path(config_path) if config_path else None
        self._config: Dict[str, Any] = {}
        self._logger = logging.getLogger("palette.infra.config")

        self._load_config()

    def _load_config(self) -> None:
        """Load the palette section from file."""
        self._config = {}
        if self._config_path is None:
            return

        if not self._config_path.exists():
            self._logger.warning(f"Config file not found: {self._config_path}")
            return

        with open(self._config_path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValidationError(
                    f"Config file {self._config_path} is not valid YAML: {e}", field="config"
                ) from e

        if not isinstance(data, dict):
            raise ValidationError(
                f"Config file {self._config_path} must contain a mapping", field="config"
            )

        section = data.get(SECTION, {}) or {}
        if not isinstance(section, dict):
            raise ValidationError(f"'{SECTION}' section must be a mapping", field=SECTION)

        self._config = section
        self._logger.info(f"Loaded config from {self._config_path}")

    def _environment(self) -> Dict[str, Any]:
        overrides = {}
        for name in PaletteConfig.model_fields:
            if name == "shortcut_overrides":
                continue
            value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if value is not None:
                overrides[name] = value
        return overrides

    def load(self) -> PaletteConfig:
        """
        Build a validated PaletteConfig.

        Raises ValidationError (the palette's, not pydantic's) on bad values.
        """
        raw = {**self._config, **self._environment()}
        if raw.get("max_results") in ("", "none", "None", "null"):
            raw["max_results"] = None

        try:
            return PaletteConfig.model_validate(raw)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field_name = ".".join(str(p) for p in first.get("loc", ())) or "config"
            raise ValidationError(
                f"Invalid palette configuration: {field_name}: {first.get('msg')}",
                field=field_name,
            ) from e


def load_config(config_path: Optional[Union[str, Path]] = None) -> PaletteConfig:
    """Load configuration from an optional YAML file plus the environment."""
    return ConfigManager(config_path).load()
