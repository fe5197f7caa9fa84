"""
Configuration manager for loading and saving application settings.

Handles config file I/O, HTTPS validation, and default config creation.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from qbo_query.constants import (
    DEFAULT_CONFIG_FILE,
    PRODUCTION_API_BASE_URL,
    SANDBOX_API_BASE_URL,
)
from qbo_query.exceptions import ConfigurationError
from qbo_query.models.config import AppConfig

ENVIRONMENTS: dict[str, str] = {
    "production": PRODUCTION_API_BASE_URL,
    "sandbox": SANDBOX_API_BASE_URL,
}

_INT_KEYS = {"minor_version"}
_FLOAT_KEYS = {"request_timeout_seconds"}


class ConfigManager:
    """Manages application configuration file."""

    def __init__(self, config_path: Path) -> None:
        """
        Initialize ConfigManager.

        Args:
            config_path: Path to config.json file or a directory containing it
        """
        if config_path.suffix != ".json":
            self.config_path = config_path / DEFAULT_CONFIG_FILE
        else:
            self.config_path = config_path
        self._config: AppConfig | None = None
        self._extras: dict[str, Any] = {}

    def load(self) -> AppConfig:
        """
        Load configuration from file, creating default if missing.

        Returns:
            AppConfig: Validated configuration object

        Raises:
            ConfigurationError: If config file contains invalid JSON or an HTTP URL
        """
        if not self.config_path.exists():
            return self._create_default_config()

        try:
            config_data = json.loads(self.config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file {self.config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file must contain a JSON object: {self.config_path}")

        config_data["config_dir"] = str(self.config_path.parent)

        known_fields = set(AppConfig.model_fields.keys())
        self._extras = {k: v for k, v in config_data.items() if k not in known_fields}
        try:
            app_config = AppConfig(**{k: v for k, v in config_data.items() if k in known_fields})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        self._config = app_config
        return app_config

    def save(self, config: AppConfig | None = None) -> None:
        """
        Save configuration to file.

        Args:
            config: Configuration object to save (uses last loaded if None)
        """
        if config is None:
            if self._config is None:
                self._config = self.load()
            config = self._config
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        # config_dir is derived from the file location
        config_dict = config.model_dump(mode="json", exclude={"config_dir"})
        merged = {**config_dict, **self._extras}
        self.config_path.write_text(json.dumps(merged, indent=2), encoding="utf-8")

    def _create_default_config(self) -> AppConfig:
        """
        Create default configuration file.

        Returns:
            AppConfig: Default configuration object
        """
        default_config = AppConfig(config_dir=self.config_path.parent)
        self.save(default_config)
        self._config = default_config
        return default_config

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value.

        Supported keys:
        - api_base_url (str): API base URL (must be HTTPS)
        - token_url (str): OAuth token endpoint (must be HTTPS)
        - minor_version (int): API minor version
        - request_timeout_seconds (float): HTTP timeout
        - environment (production|sandbox): shorthand for api_base_url

        Raises:
            ConfigurationError: If the key is unknown or the value invalid
        """
        if self._config is None:
            self._config = self.load()

        if key == "environment":
            env = str(value).lower()
            if env not in ENVIRONMENTS:
                raise ConfigurationError(
                    f"Unknown environment: {value}. Choose from: {', '.join(ENVIRONMENTS)}"
                )
            key, value = "api_base_url", ENVIRONMENTS[env]

        if key == "config_dir" or key not in AppConfig.model_fields:
            raise ConfigurationError(f"Unknown configuration key: {key}")

        try:
            if key in _INT_KEYS:
                value = int(value)
            elif key in _FLOAT_KEYS:
                value = float(value)
            setattr(self._config, key, value)
        except (TypeError, ValueError, ValidationError) as e:
            raise ConfigurationError(f"Invalid value for {key}: {e}") from e

    def get(self, key: str) -> Any:
        """Get a configuration value by key (extras included)."""
        if self._config is None:
            self._config = self.load()

        if key in AppConfig.model_fields:
            return getattr(self._config, key)
        return self._extras.get(key)

    def to_dict(self) -> dict[str, Any]:
        """Get all configuration as a dictionary."""
        if self._config is None:
            self._config = self.load()

        result = self._config.model_dump(mode="json")
        result.update(self._extras)
        return result
