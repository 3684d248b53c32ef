"""Extension-based MIME inference.

File content is never sniffed: a renamed file is trusted by its extension.
"""

from __future__ import annotations

import mimetypes
from pathlib import PurePath

# Types Python's mimetypes registry does not know on every supported version.
_EXTENSION_MIME: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
}

DEFAULT_ALLOWED_MIME_TYPES: frozenset[str] = frozenset(
    {"image/png", "image/jpeg", "image/webp", "image/avif"}
)


def infer_mime_type(name: str | PurePath) -> str | None:
    suffix = PurePath(name).suffix.lower()
    if not suffix:
        return None
    known = _EXTENSION_MIME.get(suffix)
    if known is not None:
        return known
    guessed, _encoding = mimetypes.guess_type(f"x{suffix}", strict=False)
    return guessed
