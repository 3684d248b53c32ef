from __future__ import annotations

from collections.abc import Callable

from PySide6.QtWidgets import (
    QCheckBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QWidget,
)

from .config import Configuration
from .logger import get_logger
from .settings_controller import SettingsController
from .styles import PANEL_QSS

_logger = get_logger("ui_settings")

DirectoryChooser = Callable[[str], str | None]


def choose_directory_dialog(parent: QWidget | None, start: str = "") -> str | None:
    """Host-native folder picker. Returns None when cancelled."""
    path = QFileDialog.getExistingDirectory(parent, "Choose image folder", start)
    return path or None


class SettingsPanel(QWidget):
    """Settings form: enabled toggle, image folder, max width and scan status."""

    def __init__(
        self,
        controller: SettingsController,
        parent: QWidget | None = None,
        *,
        choose_directory: DirectoryChooser | None = None,
    ):
        super().__init__(parent)
        self.setObjectName("imageEmbedderSettings")
        self.setWindowTitle("Image Embedder")
        self.setStyleSheet(PANEL_QSS)
        self._controller = controller
        self._index_manager = None
        self._choose_directory = choose_directory or (lambda start: choose_directory_dialog(self, start))

        form = QFormLayout(self)

        self._chk_enabled = QCheckBox("Embed images in chat messages")
        form.addRow(self._chk_enabled)

        folder_row = QHBoxLayout()
        self._edit_folder = QLineEdit()
        self._edit_folder.setReadOnly(True)
        self._edit_folder.setPlaceholderText("No folder selected")
        self._btn_choose = QPushButton("Choose folder")
        folder_row.addWidget(self._edit_folder, 1)
        folder_row.addWidget(self._btn_choose)
        form.addRow(QLabel("Image folder"), folder_row)

        self._edit_max_width = QLineEdit()
        self._edit_max_width.setPlaceholderText("600px")
        form.addRow(QLabel("Max width"), self._edit_max_width)

        self._chk_inline_data = QCheckBox("Inline image data (base64) instead of file links")
        form.addRow(self._chk_inline_data)

        self._lbl_status = QLabel("")
        self._lbl_status.setObjectName("statusLabel")
        self._lbl_status.setWordWrap(True)
        form.addRow(self._lbl_status)

        self._apply_config(controller.config)

        controller.config_changed.connect(self._apply_config)
        self._chk_enabled.toggled.connect(controller.set_enabled)
        self._chk_inline_data.toggled.connect(controller.set_inline_data)
        self._btn_choose.clicked.connect(self._on_choose_clicked)
        self._edit_max_width.editingFinished.connect(self._on_max_width_edited)

    def _apply_config(self, config: Configuration) -> None:
        # Reflect config without feeding the edits back into the controller.
        for box, checked in ((self._chk_enabled, config.enabled), (self._chk_inline_data, config.inline_data)):
            box.blockSignals(True)
            try:
                box.setChecked(checked)
            finally:
                box.blockSignals(False)
        self._edit_folder.setText(config.folder or "")
        if not self._edit_max_width.hasFocus():
            self._edit_max_width.setText(config.max_width)

    def _on_choose_clicked(self) -> None:
        start = self._controller.config.folder or ""
        try:
            path = self._choose_directory(start)
        except Exception as ex:
            _logger.error("folder picker failed: %s", ex)
            return
        if not path:
            _logger.debug("folder selection cancelled")
            return
        self._controller.set_folder(path)

    def _on_max_width_edited(self) -> None:
        text = self._edit_max_width.text().strip()
        if not text:
            self._edit_max_width.setText(self._controller.config.max_width)
            return
        self._controller.set_max_width(text)

    def bind_index_manager(self, manager) -> None:
        """Show the index manager's scan status in the panel."""
        self._index_manager = manager
        self._on_status_changed(manager.status)
        manager.status_changed.connect(self._on_status_changed)

    def _on_status_changed(self, text: str) -> None:
        manager = self._index_manager
        self.set_status(text, error=manager is not None and manager.last_error is not None)

    def set_status(self, text: str, *, error: bool = False) -> None:
        self._lbl_status.setText(text)
        self._lbl_status.setProperty("error", "true" if error else "false")
        style = self._lbl_status.style()
        style.unpolish(self._lbl_status)
        style.polish(self._lbl_status)

    @property
    def status_text(self) -> str:
        return self._lbl_status.text()
