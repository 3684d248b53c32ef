from __future__ import annotations

import traceback
from contextlib import suppress

from PySide6.QtCore import QObject, Signal

from image_embedder.errors import ConfigurationError
from image_embedder.logger import get_logger

from .scanner import rebuild

_logger = get_logger("scan_worker")


class ScanWorker(QObject):
    """Runs one folder scan on a QThread.

    Payloads crossing the thread boundary are plain Python objects; the index
    itself is immutable so handing it to the owner thread is safe. Exactly one
    of ``scan_finished``/``scan_failed``/``canceled`` is emitted, then
    ``done``.
    """

    scan_finished = Signal(int, object)  # generation, ImageIndex
    scan_failed = Signal(int, str)  # generation, message
    canceled = Signal(int)  # generation
    done = Signal()

    def __init__(self, folder: str | None, allowed_mime_types, generation: int, parent=None) -> None:
        super().__init__(parent)
        self._folder = folder
        self._allowed = frozenset(allowed_mime_types)
        self._generation = int(generation)
        self._stopped = False

    @property
    def generation(self) -> int:
        return self._generation

    def stop(self) -> None:
        self._stopped = True

    def _is_stopped(self) -> bool:
        return self._stopped

    def run(self) -> None:
        try:
            index = rebuild(
                self._folder,
                self._allowed,
                generation=self._generation,
                should_stop=self._is_stopped,
            )
            # A stopped scan may be partial; never publish it.
            if self._stopped:
                self.canceled.emit(self._generation)
            else:
                self.scan_finished.emit(self._generation, index)
        except ConfigurationError as exc:
            self.scan_failed.emit(self._generation, str(exc))
        except Exception as exc:
            _logger.error("scan gen=%d crashed: %s\n%s", self._generation, exc, traceback.format_exc())
            self.scan_failed.emit(self._generation, f"scan failed: {exc}")
        finally:
            with suppress(RuntimeError):
                self.done.emit()
