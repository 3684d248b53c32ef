"""Pytest configuration.

The index manager, settings controller and settings panel are Qt objects, so
a single `QApplication` is created for the whole session before collection
and shut down cleanly at the end. Tests run on the offscreen platform unless
QT_QPA_PLATFORM is already set.
"""

from __future__ import annotations

import os
from typing import Any

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a QApplication exists before collecting/running tests."""

    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    # Import lazily so non-Qt environments can still import this conftest.
    try:
        from PySide6.QtWidgets import QApplication
    except ImportError:
        return

    global _APP

    app = QApplication.instance()
    # Keep a strong ref so it isn't GC'd mid-session.
    _APP = app if app is not None else QApplication([])


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    """Pump pending events once so worker threads and timers can settle."""

    try:
        from PySide6.QtWidgets import QApplication
    except ImportError:
        return

    app = QApplication.instance()
    if app is None:
        return

    app.quit()
    app.processEvents()
