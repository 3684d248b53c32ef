from __future__ import annotations

from collections.abc import Iterable

from PySide6.QtCore import QObject, QTimer, Signal

from .config import SETTINGS_KEY, Configuration
from .logger import get_logger
from .path_utils import normalize_folder

_logger = get_logger("settings_controller")


class SettingsController(QObject):
    """Live configuration plus debounced persistence.

    Every mutation emits ``config_changed`` and (re)starts a single-shot save
    timer, so a burst of edits (typing in the max-width field) is written once.
    ``store`` is anything with ``get(key)`` / ``set(key, value)``.
    """

    config_changed = Signal(object)  # Configuration
    folder_changed = Signal(str)  # "" when unset
    saved = Signal()

    def __init__(self, store, parent: QObject | None = None, *, save_delay_ms: int = 500, key: str = SETTINGS_KEY):
        super().__init__(parent)
        self._store = store
        self._key = key
        self._config = Configuration()

        self._save_timer = QTimer(self)
        self._save_timer.setSingleShot(True)
        self._save_timer.setInterval(int(save_delay_ms))
        self._save_timer.timeout.connect(self.flush)

    @property
    def config(self) -> Configuration:
        return self._config

    def load(self) -> Configuration:
        """Read the configuration from the store; missing data gives defaults."""
        try:
            raw = self._store.get(self._key)
        except Exception as exc:
            _logger.warning("settings store read failed: %s", exc)
            raw = None
        self._config = Configuration.from_dict(raw)
        _logger.debug("config loaded: folder=%s enabled=%s", self._config.folder, self._config.enabled)
        self.config_changed.emit(self._config)
        return self._config

    def save_pending(self) -> bool:
        return self._save_timer.isActive()

    def flush(self) -> None:
        self._save_timer.stop()
        try:
            self._store.set(self._key, self._config.to_dict())
        except Exception as exc:
            _logger.error("settings store write failed: %s", exc)
            return
        self.saved.emit()

    # ---- mutations -------------------------------------------------
    def _update(self, **changes) -> bool:
        new = self._config.with_changes(**changes)
        if new == self._config:
            return False
        self._config = new
        self.config_changed.emit(new)
        self._save_timer.start()
        return True

    def set_enabled(self, enabled: bool) -> None:
        self._update(enabled=bool(enabled))

    def set_folder(self, folder: str | None) -> None:
        if self._update(folder=normalize_folder(folder)):
            self.folder_changed.emit(self._config.folder or "")

    def set_max_width(self, value: str) -> None:
        v = str(value).strip()
        if not v:
            # Keep the previous width rather than storing an empty CSS value.
            return
        self._update(max_width=v)

    def set_allowed_mime_types(self, mime_types: Iterable[str]) -> None:
        cleaned = frozenset(str(m).strip().lower() for m in mime_types if str(m).strip())
        if not cleaned:
            return
        self._update(allowed_mime_types=cleaned)

    def set_inline_data(self, enabled: bool) -> None:
        self._update(inline_data=bool(enabled))
