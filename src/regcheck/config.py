# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Configuration loading and validation for regcheck."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from regcheck.models import DEFAULT_TARGET, Scenario

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".regcheck.yml"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ConfigurationError(Exception):
    """Raised when configuration validation fails critically."""

    pass


class Config:
    """Configuration for the regression harness.

    Loads configuration from .regcheck.yml with validation and defaults.
    """

    DEFAULTS = {
        "target": DEFAULT_TARGET,
        "fail_fast": True,
        "enable_result_logging": True,
        "log_level": "INFO",
        "scenarios": [],  # Extra scenarios: [{name, arg, expected[, target]}]
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_path: Path to configuration file. If None, uses ./.regcheck.yml.
        """
        if config_path is None:
            config_path = Path.cwd() / DEFAULT_CONFIG_FILENAME

        self.config_path = config_path
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load and validate configuration from file."""
        if not self.config_path.exists():
            logger.info(f"Configuration file not found at {self.config_path}, using defaults")
            self._config = self.DEFAULTS.copy()
            return

        try:
            with open(self.config_path, encoding="utf-8") as f:
                loaded_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.warning(
                f"Error parsing configuration file {self.config_path}: {e}, using defaults"
            )
            self._config = self.DEFAULTS.copy()
            return
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file {self.config_path}: {e}"
            ) from e

        if loaded_config is None:
            logger.warning("Configuration file is empty, using defaults")
            self._config = self.DEFAULTS.copy()
            return

        if not isinstance(loaded_config, dict):
            logger.warning(
                f"Configuration file must contain a YAML dictionary, "
                f"got {type(loaded_config)}, using defaults"
            )
            self._config = self.DEFAULTS.copy()
            return

        # Start with defaults and override with loaded values
        self._config = self.DEFAULTS.copy()
        self._validate_and_merge(loaded_config)

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
        expected_type = type(self.DEFAULTS[key])
        if not isinstance(value, expected_type):
            return False

        if key == "target":
            return bool(value) and not value.startswith(":")
        elif key == "log_level":
            return value.upper() in LOG_LEVELS
        elif key == "scenarios":
            return all(self._is_valid_scenario_entry(entry) for entry in value)

        return True

    @staticmethod
    def _is_valid_scenario_entry(entry: Any) -> bool:
        if not isinstance(entry, dict):
            return False
        if not isinstance(entry.get("name"), str) or not entry["name"]:
            return False
        for int_key in ("arg", "expected"):
            number = entry.get(int_key)
            # bool is an int subclass; YAML "yes" must not pass as 1
            if isinstance(number, bool) or not isinstance(number, int):
                return False
        return "target" not in entry or isinstance(entry["target"], str)

    @property
    def target(self) -> str:
        """Dotted target ("module" or "module:Class") holding the callables under test."""
        value = self._config["target"]
        assert isinstance(value, str)
        return value

    @property
    def fail_fast(self) -> bool:
        """Whether the first failing scenario stops the run."""
        value = self._config["fail_fast"]
        assert isinstance(value, bool)
        return value

    @property
    def enable_result_logging(self) -> bool:
        """Whether scenario results are written to the JSONL result log."""
        value = self._config["enable_result_logging"]
        assert isinstance(value, bool)
        return value

    @property
    def log_level(self) -> int:
        """Python logging level for the run."""
        value = self._config["log_level"]
        assert isinstance(value, str)
        level = logging.getLevelName(value.upper())
        assert isinstance(level, int)
        return level

    @property
    def scenarios(self) -> List[Scenario]:
        """Extra scenarios declared in the configuration file.

        Entries without their own target run against `target`.
        """
        return [
            Scenario(
                name=entry["name"],
                arg=entry["arg"],
                expected=entry["expected"],
                target=entry.get("target", self.target),
            )
            for entry in self._config["scenarios"]
        ]
