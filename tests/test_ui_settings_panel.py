from __future__ import annotations

from pathlib import Path

import pytest

from image_embedder.image_index.index_manager import ImageIndexManager
from image_embedder.settings_controller import SettingsController
from image_embedder.ui_settings import SettingsPanel
from tests.helpers.fakes import MemorySettingsStore, make_images


@pytest.fixture
def controller() -> SettingsController:
    c = SettingsController(MemorySettingsStore(), save_delay_ms=60_000)
    c.load()
    return c


def _panel(qtbot, controller, chooser=None) -> SettingsPanel:
    panel = SettingsPanel(controller, choose_directory=chooser or (lambda start: None))
    qtbot.addWidget(panel)
    return panel


def test_panel_shows_current_config(qtbot, controller, tmp_path: Path) -> None:
    controller.set_folder(str(tmp_path))
    controller.set_max_width("75%")

    panel = _panel(qtbot, controller)

    assert panel._chk_enabled.isChecked() is True
    assert panel._edit_folder.text() == str(tmp_path.resolve())
    assert panel._edit_folder.isReadOnly()
    assert panel._edit_max_width.text() == "75%"


def test_toggle_updates_controller(qtbot, controller) -> None:
    panel = _panel(qtbot, controller)

    panel._chk_enabled.click()

    assert controller.config.enabled is False
    assert controller.save_pending()


def test_choose_folder_sets_folder(qtbot, controller, tmp_path: Path) -> None:
    starts: list[str] = []

    def chooser(start: str) -> str:
        starts.append(start)
        return str(tmp_path)

    panel = _panel(qtbot, controller, chooser)

    panel._btn_choose.click()

    assert starts == [""]
    assert controller.config.folder == str(tmp_path.resolve())
    assert panel._edit_folder.text() == str(tmp_path.resolve())


def test_cancelled_chooser_keeps_folder(qtbot, controller, tmp_path: Path) -> None:
    controller.set_folder(str(tmp_path))
    panel = _panel(qtbot, controller, lambda start: None)

    panel._btn_choose.click()

    assert controller.config.folder == str(tmp_path.resolve())


def test_failing_chooser_is_contained(qtbot, controller) -> None:
    def chooser(start: str) -> str:
        raise RuntimeError("no dialog available")

    panel = _panel(qtbot, controller, chooser)

    panel._btn_choose.click()

    assert controller.config.folder is None


def test_max_width_edit_is_applied(qtbot, controller) -> None:
    panel = _panel(qtbot, controller)

    panel._edit_max_width.setText("480px")
    panel._edit_max_width.editingFinished.emit()

    assert controller.config.max_width == "480px"


def test_blank_max_width_restores_previous(qtbot, controller) -> None:
    panel = _panel(qtbot, controller)

    panel._edit_max_width.setText("  ")
    panel._edit_max_width.editingFinished.emit()

    assert controller.config.max_width == "600px"
    assert panel._edit_max_width.text() == "600px"


def test_status_follows_index_manager(qtbot, controller, tmp_path: Path) -> None:
    manager = ImageIndexManager(threaded=False)
    try:
        panel = _panel(qtbot, controller)
        panel.bind_index_manager(manager)
        assert panel.status_text == "No folder selected"

        manager.configure(str(make_images(tmp_path / "pics", "a.png")))
        assert panel.status_text == "1 image found"
        assert panel._lbl_status.property("error") == "false"

        manager.configure(str(tmp_path / "missing"))
        assert panel.status_text.startswith("folder missing")
        assert panel._lbl_status.property("error") == "true"
    finally:
        manager.shutdown()


def test_inline_data_checkbox_updates_controller(qtbot, controller) -> None:
    panel = _panel(qtbot, controller)
    assert panel._chk_inline_data.isChecked() is False

    panel._chk_inline_data.click()

    assert controller.config.inline_data is True
    assert controller.save_pending()


def test_inline_data_checkbox_follows_controller(qtbot, controller) -> None:
    panel = _panel(qtbot, controller)

    with qtbot.assertNotEmitted(controller.saved):
        controller.set_inline_data(True)

    assert panel._chk_inline_data.isChecked() is True
