"""ImageIndexManager: owner of the live image index.

- Holds the current :class:`ImageIndex` and replaces it by a single reference
  swap when a scan completes.
- Every rescan request gets a new generation number. Results from any older
  generation are discarded, so a slow early scan cannot overwrite a later one.
- Watches the current folder (top level only) with a QFileSystemWatcher and
  coalesces bursts of change notifications with a single-shot timer.

Readers call :meth:`lookup` or take :attr:`index` at any time; they always
see a complete snapshot.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterable

from PySide6.QtCore import QFileSystemWatcher, QObject, QThread, QTimer, Signal

from image_embedder.errors import ConfigurationError
from image_embedder.logger import get_logger
from image_embedder.path_utils import normalize_folder

from .mime_types import DEFAULT_ALLOWED_MIME_TYPES
from .models import ImageIndex, ImageRecord
from .scan_worker import ScanWorker
from .scanner import rebuild

_logger = get_logger("index_manager")

_WORKER_JOIN_MS = 2000


class ImageIndexManager(QObject):
    folder_changed = Signal(str)  # "" when unset
    scan_started = Signal(int)  # generation
    scan_complete = Signal(int, int)  # generation, image count
    scan_failed = Signal(int, str)  # generation, message
    status_changed = Signal(str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        debounce_ms: int = 200,
        threaded: bool = True,
    ) -> None:
        super().__init__(parent)
        self._folder: str | None = None
        self._allowed: frozenset[str] = DEFAULT_ALLOWED_MIME_TYPES
        self._index: ImageIndex = ImageIndex.empty()
        self._generation: int = 0
        self._threaded = bool(threaded)
        self._status: str = ""
        self._last_error: str | None = None
        self._closed = False

        # generation -> (thread, worker); several may overlap while a slow
        # scan is being superseded.
        self._active: dict[int, tuple[QThread, ScanWorker]] = {}

        self._watcher = QFileSystemWatcher(self)
        self._watcher.directoryChanged.connect(self._on_directory_changed)

        self._refresh_timer = QTimer(self)
        self._refresh_timer.setSingleShot(True)
        self._refresh_timer.setInterval(int(debounce_ms))
        self._refresh_timer.timeout.connect(self.request_rescan)

        self._set_status(self._describe_status())

    # ---- read side -------------------------------------------------
    @property
    def index(self) -> ImageIndex:
        return self._index

    @property
    def folder(self) -> str | None:
        return self._folder

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def status(self) -> str:
        return self._status

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def is_scanning(self) -> bool:
        return self._generation in self._active

    def watched_directories(self) -> list[str]:
        return list(self._watcher.directories())

    def lookup(self, name: str) -> ImageRecord | None:
        return self._index.lookup(name)

    # ---- configuration ---------------------------------------------
    def configure(self, folder: str | None, allowed_mime_types: Iterable[str] | None = None) -> int:
        """Apply folder and MIME allow-list, then start a rescan."""
        if allowed_mime_types is not None:
            self._allowed = frozenset(allowed_mime_types)
        self._set_folder(folder)
        return self.request_rescan()

    def set_folder(self, folder: str | None) -> int:
        return self.configure(folder)

    def set_allowed_mime_types(self, allowed_mime_types: Iterable[str]) -> int:
        return self.configure(self._folder, allowed_mime_types)

    def _set_folder(self, folder: str | None) -> None:
        normalized = normalize_folder(folder)
        if normalized == self._folder:
            self._watch(normalized)
            return
        self._folder = normalized
        self._last_error = None
        self._watch(normalized)
        _logger.debug("folder changed: %s", normalized)
        self.folder_changed.emit(normalized or "")

    # ---- watcher ---------------------------------------------------
    def _watch(self, folder: str | None) -> None:
        """Watch exactly ``folder`` (or nothing)."""
        for d in list(self._watcher.directories()):
            if d != folder:
                self._watcher.removePath(d)
        if folder and folder not in self._watcher.directories():
            if not self._watcher.addPath(folder):
                # Missing folders cannot be watched; retried after the next successful scan.
                _logger.debug("watcher: cannot watch %s", folder)

    def _on_directory_changed(self, path: str) -> None:
        if self._closed:
            return
        _logger.debug("watcher: directoryChanged %s", path)
        self._refresh_timer.start()

    # ---- scanning --------------------------------------------------
    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def request_rescan(self) -> int:
        """Start a rescan of the current folder and return its generation.

        Older in-flight scans are asked to stop; whatever they deliver later is
        ignored.
        """
        if self._closed:
            return self._generation
        generation = self._next_generation()
        self.scan_started.emit(generation)

        if not self._threaded:
            self._scan_inline(generation)
            return generation

        for _thread, worker in self._active.values():
            with contextlib.suppress(RuntimeError):
                worker.stop()

        worker = ScanWorker(self._folder, self._allowed, generation)
        thread = QThread(self)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.scan_finished.connect(self._on_scan_finished)
        worker.scan_failed.connect(self._on_scan_failed)
        worker.canceled.connect(self._on_scan_canceled)
        worker.done.connect(thread.quit)
        worker.done.connect(worker.deleteLater)
        thread.finished.connect(self._reap_threads)

        self._active[generation] = (thread, worker)
        thread.start()
        return generation

    def rescan_now(self) -> ImageIndex:
        """Scan on the calling thread and return the resulting current index.

        On failure the previous index is returned unchanged.
        """
        if self._closed:
            return self._index
        generation = self._next_generation()
        self.scan_started.emit(generation)
        self._scan_inline(generation)
        return self._index

    def _scan_inline(self, generation: int) -> None:
        try:
            index = rebuild(self._folder, self._allowed, generation=generation)
        except ConfigurationError as exc:
            self._on_scan_failed(generation, str(exc))
            return
        except Exception as exc:
            _logger.exception("scan gen=%d crashed", generation)
            self._on_scan_failed(generation, f"scan failed: {exc}")
            return
        self._on_scan_finished(generation, index)

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _on_scan_finished(self, generation: int, index: ImageIndex) -> None:
        if not self._is_current(generation):
            _logger.debug("discarding stale scan gen=%d (current=%d)", generation, self._generation)
            return
        self._index = index
        self._last_error = None
        # The folder may have been recreated since the watch was lost.
        self._watch(self._folder)
        _logger.info("image index ready: %d images (gen=%d)", len(index), generation)
        self.scan_complete.emit(generation, len(index))
        self._set_status(self._describe_status())

    def _on_scan_failed(self, generation: int, message: str) -> None:
        if not self._is_current(generation):
            _logger.debug("discarding stale scan failure gen=%d: %s", generation, message)
            return
        self._last_error = message
        _logger.warning("image scan failed; keeping previous index: %s", message)
        self.scan_failed.emit(generation, message)
        self._set_status(self._describe_status())

    def _on_scan_canceled(self, generation: int) -> None:
        _logger.debug("scan gen=%d canceled", generation)

    def _reap_threads(self) -> None:
        for generation, (thread, _worker) in list(self._active.items()):
            if thread.isFinished():
                del self._active[generation]
                thread.deleteLater()

    # ---- status ----------------------------------------------------
    def _describe_status(self) -> str:
        if self._last_error:
            return self._last_error
        if not self._folder:
            return "No folder selected"
        count = len(self._index)
        if count == 0:
            return "No images found"
        return f"{count} image found" if count == 1 else f"{count} images found"

    def _set_status(self, text: str) -> None:
        if text == self._status:
            return
        self._status = text
        self.status_changed.emit(text)

    # ---- lifecycle -------------------------------------------------
    def shutdown(self) -> None:
        """Stop watching, stop pending scans and drop their results."""
        if self._closed:
            return
        self._closed = True
        self._refresh_timer.stop()
        for d in list(self._watcher.directories()):
            self._watcher.removePath(d)
        for f in list(self._watcher.files()):
            self._watcher.removePath(f)

        for thread, worker in list(self._active.values()):
            with contextlib.suppress(RuntimeError):
                worker.stop()
                thread.quit()
                thread.wait(_WORKER_JOIN_MS)
        self._active.clear()
        _logger.debug("index manager shut down")
