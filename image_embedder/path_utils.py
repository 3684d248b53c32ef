"""Path normalization utilities.

Rules used across the project:

- Folders and image paths are stored as absolute, OS-native strings.
- Image sources handed to the chat renderer are ``file://`` URIs.

Keep this module free of Qt dependencies.
"""

from __future__ import annotations

from pathlib import Path

_DRIVE_PREFIX_LEN = 2


def _normalize_drive_letter(path_str: str) -> str:
    # Normalize drive letter casing on Windows ("c:\\" -> "C:\\").
    if len(path_str) >= _DRIVE_PREFIX_LEN and path_str[1] == ":":
        return path_str[0].upper() + path_str[1:]
    return path_str


def abs_path(path: str | Path) -> Path:
    """Return an absolute path without requiring that it exists."""
    p = Path(path).expanduser()
    try:
        # strict=False avoids exceptions for non-existent paths.
        return p.resolve(strict=False)
    except (OSError, RuntimeError):
        return p.absolute()


def abs_path_str(path: str | Path) -> str:
    """Absolute, OS-native path string (Windows uses backslashes)."""
    return _normalize_drive_letter(str(abs_path(path)))


def normalize_folder(path: str | Path | None) -> str | None:
    """Absolute folder string, or None for an unset/blank folder."""
    if path is None:
        return None
    text = str(path).strip()
    if not text:
        return None
    return abs_path_str(text)


def file_uri(path: str | Path) -> str:
    """``file://`` URI for an already absolute path; no filesystem access."""
    return Path(path).as_uri()
