"""ImageEmbedder: the plugin facade the chat host wires up.

Host wiring, in order:

    embedder = ImageEmbedder(settings_store, message_store)
    embedder.start()                                   # load settings, first scan
    host.on("message_received", embedder.hook.on_message_received)
    host.on("message_swiped", embedder.hook.on_message_swiped)
    host.add_css(embedder.stylesheet)
    host.add_settings_page(embedder.create_settings_panel())
    ...
    embedder.shutdown()                                # flush settings, drop watches
"""

from __future__ import annotations

from PySide6.QtCore import QObject

from .config import Configuration
from .image_index.index_manager import ImageIndexManager
from .image_index.models import ImageIndex
from .logger import get_logger
from .message_hook import MessageHook, MessageStore
from .resolver import resolve
from .settings_controller import SettingsController
from .styles import EMBED_CSS
from .ui_settings import DirectoryChooser, SettingsPanel

_logger = get_logger("plugin")


class ImageEmbedder(QObject):
    def __init__(
        self,
        settings_store,
        message_store: MessageStore | None = None,
        parent: QObject | None = None,
        *,
        threaded: bool = True,
        save_delay_ms: int = 500,
        watch_debounce_ms: int = 200,
    ) -> None:
        super().__init__(parent)
        self.settings = SettingsController(settings_store, self, save_delay_ms=save_delay_ms)
        self.index_manager = ImageIndexManager(self, debounce_ms=watch_debounce_ms, threaded=threaded)
        self.hook: MessageHook | None = None
        if message_store is not None:
            self.hook = MessageHook(message_store, self.current_index, self.current_config)

        # (folder, allowed types) last handed to the index manager
        self._applied: tuple[str | None, frozenset[str]] | None = None
        self._started = False
        self.settings.config_changed.connect(self._on_config_changed)

    @property
    def stylesheet(self) -> str:
        return EMBED_CSS

    def current_index(self) -> ImageIndex:
        return self.index_manager.index

    def current_config(self) -> Configuration:
        return self.settings.config

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        # load() emits config_changed, which triggers the first scan.
        self.settings.load()
        if self._applied is None:
            self._rescan_for(self.settings.config)

    def _on_config_changed(self, config: Configuration) -> None:
        if not self._started:
            return
        if self._applied != (config.folder, config.allowed_mime_types):
            self._rescan_for(config)

    def _rescan_for(self, config: Configuration) -> None:
        self._applied = (config.folder, config.allowed_mime_types)
        self.index_manager.configure(config.folder, config.allowed_mime_types)

    def resolve_text(self, text: str) -> str:
        """Resolve embed tags with the current index; identity when disabled."""
        config = self.settings.config
        if not config.enabled:
            return text
        return resolve(text, self.index_manager.index, config)

    def create_settings_panel(self, parent=None, *, choose_directory: DirectoryChooser | None = None) -> SettingsPanel:
        panel = SettingsPanel(self.settings, parent, choose_directory=choose_directory)
        panel.bind_index_manager(self.index_manager)
        return panel

    def shutdown(self) -> None:
        if self.settings.save_pending():
            self.settings.flush()
        self.index_manager.shutdown()
        _logger.debug("image embedder shut down")
