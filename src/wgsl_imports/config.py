# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Configuration loading and validation for WGSL import resolution."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".wgsl_imports.yml"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ConfigurationError(Exception):
    """Raised when configuration validation fails critically."""

    pass


class Config:
    """Configuration for WGSL import resolution.

    Loads configuration from .wgsl_imports.yml with validation and defaults.
    """

    DEFAULTS = {
        "entry_points": [],
        "forbid_imported_defines": True,
        "export_indent": 2,
        "watch_ignore_patterns": [],
        "log_level": "WARNING",
    }

    def __init__(self, config_path: Optional[Path] = None, required: bool = False):
        """Initialize configuration.

        Args:
            config_path: Path to configuration file. If None, uses default location.
            required: Whether a missing file is an error rather than a reason
                to fall back to defaults.

        Raises:
            ConfigurationError: If `required` is set and the file does not exist.
        """
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME

        if required and not config_path.is_file():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        self.config_path = config_path
        self._config: Dict[str, Any] = {}
        self._load_config()

    @classmethod
    def for_project(cls, project_root: Path) -> "Config":
        """Load the configuration file that lives at a project root."""
        return cls(config_path=Path(project_root) / CONFIG_FILENAME)

    def _load_config(self) -> None:
        """Load and validate configuration from file."""
        if not self.config_path.exists():
            logger.info(f"Configuration file not found at {self.config_path}, using defaults")
            self._config = self._defaults()
            return

        try:
            with open(self.config_path, encoding="utf-8") as f:
                loaded_config = yaml.safe_load(f)

            if loaded_config is None:
                logger.warning("Configuration file is empty, using defaults")
                self._config = self._defaults()
                return

            if not isinstance(loaded_config, dict):
                logger.warning(
                    f"Configuration file must contain a YAML dictionary, "
                    f"got {type(loaded_config)}, using defaults"
                )
                self._config = self._defaults()
                return

            # Start with defaults and override with loaded values
            self._config = self._defaults()
            self._validate_and_merge(loaded_config)

        except yaml.YAMLError as e:
            logger.warning(
                f"Error parsing configuration file {self.config_path}: {e}, using defaults"
            )
            self._config = self._defaults()
        except OSError as e:
            logger.warning(
                f"Could not read configuration file {self.config_path}: {e}, using defaults"
            )
            self._config = self._defaults()

    def _defaults(self) -> Dict[str, Any]:
        # Lists are copied so callers never mutate DEFAULTS
        return {
            key: list(value) if isinstance(value, list) else value
            for key, value in self.DEFAULTS.items()
        }

    def _validate_and_merge(self, loaded_config: Dict[str, Any]) -> None:
        """Validate loaded configuration and merge with defaults.

        Invalid parameters are logged as warnings and defaults are used.
        """
        for key, value in loaded_config.items():
            if key not in self.DEFAULTS:
                logger.warning(f"Unknown configuration parameter '{key}', ignoring")
                continue

            if not self._validate_parameter(key, value):
                logger.warning(
                    f"Invalid value for '{key}': {value}, using default {self.DEFAULTS[key]}"
                )
                continue

            self._config[key] = value

    def _validate_parameter(self, key: str, value: Any) -> bool:
        """Validate a configuration parameter.

        Returns:
            True if valid, False if invalid
        """
        # bool is a subclass of int, so check it explicitly
        expected_type = type(self.DEFAULTS[key])
        if expected_type is int and isinstance(value, bool):
            return False
        if not isinstance(value, expected_type):
            return False

        if key == "export_indent":
            return bool(0 <= value <= 8)
        elif key in ("entry_points", "watch_ignore_patterns"):
            return all(isinstance(item, str) for item in value)
        elif key == "log_level":
            return value.upper() in LOG_LEVELS

        return True

    @property
    def entry_points(self) -> List[str]:
        """Entry files, relative to the project root, resolved by default."""
        value = self._config["entry_points"]
        assert isinstance(value, list)
        return value

    @property
    def forbid_imported_defines(self) -> bool:
        """Whether imported files may not contain `#define` statements."""
        value = self._config["forbid_imported_defines"]
        assert isinstance(value, bool)
        return value

    @property
    def export_indent(self) -> int:
        """Indentation for JSON exports."""
        value = self._config["export_indent"]
        assert isinstance(value, int)
        return value

    @property
    def watch_ignore_patterns(self) -> List[str]:
        """Glob patterns whose changes never trigger re-resolution."""
        value = self._config["watch_ignore_patterns"]
        assert isinstance(value, list)
        return value

    @property
    def log_level(self) -> str:
        """Logging level name."""
        value = self._config["log_level"]
        assert isinstance(value, str)
        return value.upper()
