"""
Configuration Loader

Handles loading, parsing, and merging configuration from YAML files and
environment variables.

Author: dirmirror Project
License: MIT
"""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from ..core.errors import ConfigError
from .schema import Config

DEFAULT_CONFIG_PATH = "config.yaml"
ENV_JOB_NAME = "env"


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class ConfigLoader:
    """
    Configuration loader and manager.

    Loads configuration from a YAML file, merges environment variables and
    validates the result.
    """

    def __init__(self, config_path: Optional[str] = None, load_env_file: bool = True):
        """
        Initialize the configuration loader.

        Args:
            config_path: Path to the configuration file. If None, uses
                DIRMIRROR_CONFIG or ./config.yaml.
            load_env_file: Load variables from a .env file if present
        """
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))

        self.config_path = str(config_path or os.getenv("DIRMIRROR_CONFIG", DEFAULT_CONFIG_PATH))
        self._config: Optional[Config] = None

    def load(self) -> Config:
        """
        Load and validate configuration.

        Returns:
            Validated Config object

        Raises:
            ConfigError: If the YAML cannot be parsed or validation fails
        """
        config_data = self._load_yaml()
        config_data = self._merge_env_vars(config_data)

        try:
            self._config = Config(**config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {self.config_path}: {e}") from e

        return self._config

    def _load_yaml(self) -> Dict[str, Any]:
        """
        Load YAML configuration file.

        Returns:
            Dictionary with configuration data (defaults if the file is missing)
        """
        config_file = Path(self.config_path)

        if not config_file.exists():
            return self._create_default_config()

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML config: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {self.config_path}")
        return data

    def _create_default_config(self) -> Dict[str, Any]:
        """
        Create default configuration structure.

        Returns:
            Default configuration dictionary
        """
        return {
            "app": {
                "log_level": "INFO",
                "log_to_file": False
            },
            "mirrors": [],
            "scheduling": {
                "default_schedule": "*/15 * * * *",
                "retry_attempts": 3,
                "retry_delay": 5.0
            },
            "monitoring": {
                "debounce_seconds": 2.0,
                "poll_interval": 1.0
            }
        }

    def _merge_env_vars(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge environment variables into configuration.

        Environment variables override config file values.
        Naming convention: SECTION_KEY (e.g., APP_LOG_LEVEL). MIRROR_SOURCES
        (comma-separated) together with MIRROR_TARGET adds a job named "env".

        Args:
            config_data: Configuration dictionary from file

        Returns:
            Merged configuration dictionary
        """
        if os.getenv("APP_LOG_LEVEL"):
            config_data.setdefault("app", {})["log_level"] = os.getenv("APP_LOG_LEVEL")
        if os.getenv("APP_LOG_TO_FILE"):
            config_data.setdefault("app", {})["log_to_file"] = _env_flag(os.getenv("APP_LOG_TO_FILE"))
        if os.getenv("APP_LOG_FILE"):
            config_data.setdefault("app", {})["log_to_file"] = True
            config_data["app"]["log_file_path"] = os.getenv("APP_LOG_FILE")
        if os.getenv("APP_JSON_LOGS"):
            config_data.setdefault("app", {})["json_logs"] = _env_flag(os.getenv("APP_JSON_LOGS"))

        if os.getenv("SCHEDULE_RETRY_ATTEMPTS"):
            value = os.getenv("SCHEDULE_RETRY_ATTEMPTS")
            try:
                config_data.setdefault("scheduling", {})["retry_attempts"] = int(value)
            except ValueError as e:
                raise ConfigError(f"SCHEDULE_RETRY_ATTEMPTS must be an integer, got {value!r}") from e

        sources = [s.strip() for s in os.getenv("MIRROR_SOURCES", "").split(",") if s.strip()]
        target = os.getenv("MIRROR_TARGET", "").strip()
        if sources and target:
            mirrors = config_data.setdefault("mirrors", [])
            mirrors[:] = [m for m in mirrors if m.get("name") != ENV_JOB_NAME]
            mirrors.append({
                "name": ENV_JOB_NAME,
                "sources": sources,
                "target": target,
                "watch": _env_flag(os.getenv("MIRROR_WATCH", "false"))
            })
        elif sources or target:
            raise ConfigError("MIRROR_SOURCES and MIRROR_TARGET must be set together")

        return config_data

    def save(self, config: Config, path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file.

        Args:
            config: Config object to save
            path: Path to save to (uses default if None)
        """
        save_path = Path(path or self.config_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = config.model_dump(mode="json")

        with open(save_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

    def reload(self) -> Config:
        """Reload configuration from file."""
        return self.load()

    @property
    def config(self) -> Optional[Config]:
        """Get the current configuration object."""
        return self._config


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Convenience function to load configuration.

    Args:
        config_path: Optional path to config file

    Returns:
        Loaded and validated Config object
    """
    loader = ConfigLoader(config_path)
    return loader.load()
