"""Folder scanner that builds an :class:`ImageIndex`.

Only the top level of the folder is listed; subdirectories are ignored. Each
rebuild starts from nothing and returns a fresh index, so no stale entries can
survive a rename or delete.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from pathlib import Path

from image_embedder.errors import ConfigurationError, FileAccessError
from image_embedder.logger import get_logger
from image_embedder.path_utils import abs_path, abs_path_str

from .mime_types import infer_mime_type
from .models import ImageIndex, ImageRecord

_logger = get_logger("scanner")


def _list_folder(folder: Path) -> list[os.DirEntry]:
    if not folder.exists():
        raise ConfigurationError(f"folder missing: {folder}", str(folder))
    if not folder.is_dir():
        raise ConfigurationError(f"not a directory: {folder}", str(folder))
    try:
        with os.scandir(folder) as it:
            entries = list(it)
    except OSError as exc:
        raise ConfigurationError(f"folder unreadable: {folder} ({exc})", str(folder)) from exc
    # Sorted so the winner of a case-only name collision is stable.
    entries.sort(key=lambda e: e.name)
    return entries


def _build_record(entry: os.DirEntry, allowed_mime_types: Iterable[str]) -> ImageRecord | None:
    try:
        if not entry.is_file():
            return None
    except OSError as exc:
        raise FileAccessError(f"cannot inspect {entry.path}: {exc}", entry.path) from exc

    mime_type = infer_mime_type(entry.name)
    if mime_type is None or mime_type not in allowed_mime_types:
        return None

    try:
        stat = entry.stat()
    except OSError as exc:
        raise FileAccessError(f"cannot stat {entry.path}: {exc}", entry.path) from exc

    name = entry.name
    return ImageRecord(
        key=name.lower(),
        path=abs_path_str(entry.path),
        display_name=Path(name).stem,
        mime_type=mime_type,
        size_bytes=int(stat.st_size),
        modified_at=float(stat.st_mtime),
    )


def rebuild(
    folder: str | Path | None,
    allowed_mime_types: Iterable[str],
    *,
    generation: int = 0,
    should_stop: Callable[[], bool] | None = None,
) -> ImageIndex:
    """Scan ``folder`` and return a new index.

    Raises ConfigurationError when the folder cannot be listed. Entries that
    fail individually are logged and skipped. An unset folder gives an empty
    index without touching the filesystem.
    """
    if folder is None or not str(folder).strip():
        return ImageIndex.empty(generation=generation)

    p = abs_path(folder)
    folder_str = abs_path_str(p)
    allowed = frozenset(allowed_mime_types)
    entries = _list_folder(p)

    records: dict[str, ImageRecord] = {}
    for entry in entries:
        if should_stop is not None and should_stop():
            _logger.debug("scan gen=%d stopped early: %s", generation, folder_str)
            break
        try:
            record = _build_record(entry, allowed)
        except FileAccessError as exc:
            _logger.warning("skipping file: %s", exc)
            continue
        if record is None:
            continue
        if record.key in records:
            _logger.debug("duplicate key %s; keeping %s", record.key, records[record.key].path)
            continue
        records[record.key] = record

    _logger.debug("scan gen=%d: %d images in %s", generation, len(records), folder_str)
    return ImageIndex(records, folder=folder_str, generation=generation)
