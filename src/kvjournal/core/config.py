"""
Hierarchical configuration management.

Loads configuration from multiple sources with this precedence (highest wins):
    1. Environment variables (PREFIX_SECTION__KEY)
    2. Config file (YAML or JSON)
    3. Built-in defaults

Usage:
    config = Config(config_file="kvjournal.yaml")

    config.get("ledger.backend")     # dot-notation access
    config.get("ledger.path")        # resolved ledger directory
"""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from .config_schema import KvJournalConfig

_DEFAULT_ENV_PREFIX = "KVJOURNAL_"
_DEFAULT_DATA_DIR_NAME = ".kvjournal-data"


class Config:
    """
    Central configuration manager.

    Loads and merges configuration from defaults, a config file, and
    environment variables. Env vars use double-underscore to denote nesting:
    KVJOURNAL_LEDGER__BACKEND=memory -> config["ledger"]["backend"] = "memory"
    """

    def __init__(
        self,
        config_file: str | None = None,
        env_prefix: str = _DEFAULT_ENV_PREFIX,
        data_dir: str | None = None,
        defaults: dict[str, Any] | None = None,
    ):
        """
        Args:
            config_file: Path to YAML or JSON configuration file.
            env_prefix: Prefix for environment variable overrides.
            data_dir: Base directory for ledger data. Defaults to ~/.kvjournal-data.
            defaults: Additional default values to merge.
        """
        self.config_file = config_file
        self.env_prefix = env_prefix or ""
        self._data_dir = data_dir or os.path.join("~", _DEFAULT_DATA_DIR_NAME)
        self._extra_defaults = defaults or {}
        self.config_data: dict[str, Any] = {}

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from all sources."""
        self.config_data = self._get_default_config()

        if self._extra_defaults:
            self._update_dict(self.config_data, self._extra_defaults)

        if self.config_file and os.path.exists(self.config_file):
            file_config = self._load_file(self.config_file)
            self._update_dict(self.config_data, file_config)

        # Env vars override everything
        self._load_from_env()

    def _get_default_config(self) -> dict[str, Any]:
        data_dir = os.path.expanduser(self._data_dir)
        return {
            "paths": {
                "data_dir": data_dir,
                "log_dir": os.path.join(data_dir, "logs"),
            },
            "ledger": {
                "backend": "local",
                "path": os.path.join(data_dir, "ledger"),
            },
            "logging": {
                "level": "WARNING",
                "file": "",
            },
        }

    @staticmethod
    def _load_file(path: str) -> dict[str, Any]:
        """Load a YAML or JSON config file."""
        ext = os.path.splitext(path)[1].lower()
        with open(path) as f:
            if ext in (".yaml", ".yml"):
                return yaml.safe_load(f) or {}
            elif ext == ".json":
                return json.load(f)
        return {}

    def _update_dict(self, target: dict, source: dict) -> None:
        """Recursively merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict(target[key], value)
            else:
                target[key] = value

    def _load_from_env(self) -> None:
        if not self.env_prefix:
            return
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(self.env_prefix):
                continue
            key_parts = env_key[len(self.env_prefix) :].lower().split("__")

            current = self.config_data
            for part in key_parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[key_parts[-1]] = env_value

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a config value by dot-notation path.

        Args:
            key_path: e.g. "ledger.backend", "logging.level"
            default: Returned when key is not found.
        """
        current = self.config_data
        for part in key_path.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def set(self, key_path: str, value: Any) -> None:
        """Set a config value by dot-notation path, creating intermediate dicts."""
        parts = key_path.split(".")
        current = self.config_data
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value

    def validated(self) -> KvJournalConfig:
        """Return the config as a validated pydantic model.

        Raises:
            ConfigurationError: if the merged config fails validation.
        """
        from pydantic import ValidationError

        from .config_schema import KvJournalConfig
        from .exceptions import ConfigurationError

        try:
            return KvJournalConfig.model_validate(self.config_data)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e


# Module-level singleton
_config_instance: Config | None = None


def get_config(
    config_file: str | None = None,
    env_prefix: str = _DEFAULT_ENV_PREFIX,
    data_dir: str | None = None,
) -> Config:
    """Get or create the global Config singleton."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_file=config_file, env_prefix=env_prefix, data_dir=data_dir)
    return _config_instance


def reset_config() -> None:
    """Reset the global Config singleton (useful for testing)."""
    global _config_instance
    _config_instance = None
