"""Rewrite bracket embed tags in chat text into ``<img>`` markup.

Tag format (what users type in chat)::

    [cat.png]        -> max-width from the configuration
    [cat.png:50%]    -> width: 50%
    [Cat.JPEG:320]   -> width: 320

Filenames are matched case-insensitively against the image index. Tags whose
file is not indexed are left exactly as written.
"""

from __future__ import annotations

import base64
import html
import re
from collections.abc import Iterable

from image_embedder.config import Configuration
from image_embedder.errors import RenderFailure
from image_embedder.image_index.models import ImageIndex, ImageRecord
from image_embedder.logger import get_logger
from image_embedder.path_utils import file_uri

_logger = get_logger("resolver")

MARKER_CLASS = "user-image-embed"
FAILED_CLASS = "user-image-embed-failed"

# A filename may not contain brackets, so "[see [cat.png]" still finds the inner tag.
TAG_PATTERN = re.compile(
    r"\[([^\[\]]+?\.(?:png|jpe?g|webp|avif))(?::(\d+%?))?\]",
    re.IGNORECASE,
)


def _data_uri(record: ImageRecord) -> str:
    try:
        with open(record.path, "rb") as f:
            data = f.read()
    except OSError as exc:
        raise RenderFailure(f"cannot read {record.path}: {exc}") from exc
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{record.mime_type};base64,{encoded}"


def image_source(record: ImageRecord, inline_data: bool = False) -> str:
    if inline_data:
        return _data_uri(record)
    return file_uri(record.path)


def _esc(value: str) -> str:
    return html.escape(value, quote=True)


def render_image(record: ImageRecord, size: str | None, config: Configuration) -> str:
    """Markup for one resolved tag; a failure placeholder if the source is unavailable."""
    try:
        src = image_source(record, config.inline_data)
    except RenderFailure as exc:
        _logger.warning("image load failed: %s", exc)
        return f'<span class="{FAILED_CLASS}">[Image load failed: {_esc(record.display_name)}]</span>'

    style = f"width: {size}" if size else f"max-width: {config.max_width}"
    return (
        f'<img src="{_esc(src)}" alt="{_esc(record.display_name)}" '
        f'style="{_esc(style)}" class="{MARKER_CLASS}">'
    )


def resolve(text: str, index: ImageIndex, config: Configuration) -> str:
    if not text or "[" not in text:
        return text

    def _replace(match: re.Match[str]) -> str:
        record = index.lookup(match.group(1))
        if record is None:
            return match.group(0)
        return render_image(record, match.group(2), config)

    return TAG_PATTERN.sub(_replace, text)


def resolve_many(texts: Iterable[str], index: ImageIndex, config: Configuration) -> list[str]:
    """Resolve alternate texts (swipes) against one index snapshot."""
    return [resolve(t, index, config) for t in texts]


def find_tags(text: str) -> list[tuple[str, str | None]]:
    """All ``(filename, size)`` pairs written in ``text``, in order."""
    return [(m.group(1), m.group(2)) for m in TAG_PATTERN.finditer(text or "")]
