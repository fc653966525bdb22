"""Configuration management for codeflow."""

import os
from pathlib import Path
from typing import Any, Optional
import yaml


CONFIG_ENV_VAR = "CODEFLOW_CONFIG"


class Config:
    """Configuration manager with lazy loading and defaults."""

    _instance: Optional["Config"] = None
    _config: dict = {}

    DEFAULT_CONFIG = {
        "storage": {
            "history_path": "./data/history.json",
            "history_limit": 10,
            "max_records_per_owner": 100
        },
        "server": {
            "host": "127.0.0.1",
            "port": 5000
        },
        "logging": {
            "level": "INFO",
            "file": None,
            "rich": True,
            "modules": {}
        }
    }

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def load(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from YAML file.

        Lookup order: explicit path, $CODEFLOW_CONFIG, config/config.yaml
        next to the source tree.
        """
        if config_path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            if env_path:
                config_path = Path(env_path)
            else:
                config_path = Path(__file__).parent.parent.parent.parent / "config" / "config.yaml"

        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
        else:
            self._config = {}

    def reset(self) -> None:
        """Forget loaded values; the next get() reloads."""
        self._config = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value using dot notation (e.g., 'server.port')."""
        if not self._config:
            self.load()

        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                # Try default config
                default_value = self.DEFAULT_CONFIG
                for dk in keys:
                    if isinstance(default_value, dict) and dk in default_value:
                        default_value = default_value[dk]
                    else:
                        return default
                return default_value

        return value

    @property
    def history_path(self) -> Path:
        """Get the history store file."""
        return Path(self.get("storage.history_path", "./data/history.json"))

    @property
    def history_limit(self) -> int:
        """Get the number of history entries returned per query."""
        return int(self.get("storage.history_limit", 10))

    @property
    def max_records_per_owner(self) -> Optional[int]:
        """Get how many analyses are kept per owner (None keeps all)."""
        value = self.get("storage.max_records_per_owner", 100)
        return int(value) if value else None

    @property
    def log_file(self) -> Optional[Path]:
        """Get the log file path, if file logging is enabled."""
        log_file = self.get("logging.file")
        return Path(log_file) if log_file else None


# Global config instance
config = Config()
