from __future__ import annotations

import json
import os
from typing import Any

from .logger import get_logger
from .path_utils import abs_path_str

_logger = get_logger("settings")

SETTINGS_ENV = "IMAGE_EMBEDDER_SETTINGS"


def default_settings_path() -> str:
    env = (os.getenv(SETTINGS_ENV) or "").strip()
    if env:
        return abs_path_str(env)
    return abs_path_str(os.path.join("~", ".image_embedder", "settings.json"))


class SettingsManager:
    """JSON-file settings store keyed by extension id.

    Stands in for the chat host's settings store: ``get(key)`` returns the
    stored object or None, ``set(key, value)`` stores and writes the file.
    Load and save failures are logged, never raised.
    """

    def __init__(self, settings_path: str):
        self.settings_path = abs_path_str(settings_path)
        self._settings: dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
                    _logger.warning("settings file is not an object: %s", self.settings_path)
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> bool:
        try:
            os.makedirs(os.path.dirname(self.settings_path), exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
            return True
        except (OSError, TypeError, ValueError) as e:
            _logger.error("settings save failed: %s", e)
            return False

    def get(self, key: str, default: Any = None) -> Any:
        return self._settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings
