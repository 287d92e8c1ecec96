"""Runtime configuration with ENV > settings file > default priority."""

import json
import os
from pathlib import Path
from threading import Lock
from typing import Any, Dict

from dlpath.config import env
from dlpath.core.logger import setup_logger

logger = setup_logger(__name__)


def _get_settings_path() -> Path:
    return Path(env.CONFIG_DIR) / "settings.json"


def load_config_file() -> Dict[str, Any]:
    config_path = _get_settings_path()

    if not config_path.exists():
        return {}

    try:
        with open(config_path, 'r') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in config file {config_path}: {e}")
        return {}


def save_config_file(values: Dict[str, Any]) -> bool:
    try:
        config_path = _get_settings_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        existing = load_config_file()
        existing.update(values)

        with open(config_path, 'w') as f:
            json.dump(existing, f, indent=2)

        logger.info(f"Saved settings to {config_path}")
        return True
    except OSError as e:
        logger.error(f"Error saving config file: {e}")
        return False


class Config:
    """Lazily loaded view over the settings file.

    Environment variables always win so deployments can pin values without
    touching the mounted config directory.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._values: Dict[str, Any] | None = None

    def refresh(self) -> None:
        with self._lock:
            self._values = load_config_file()

    def get(self, key: str, default: Any = None) -> Any:
        env_value = os.environ.get(key)
        if env_value is not None:
            return env_value

        with self._lock:
            if self._values is None:
                self._values = load_config_file()
            values = self._values

        return values.get(key, default)


config = Config()
