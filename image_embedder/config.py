from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from image_embedder.image_index.mime_types import DEFAULT_ALLOWED_MIME_TYPES
from image_embedder.path_utils import normalize_folder

SETTINGS_KEY = "image_embedder"
DEFAULT_MAX_WIDTH = "600px"


@dataclass(frozen=True)
class Configuration:
    """User-editable plugin settings.

    Only these fields are persisted; the image index is always rebuilt from
    ``folder`` and never stored with the settings.
    """

    enabled: bool = True
    folder: str | None = None
    max_width: str = DEFAULT_MAX_WIDTH
    allowed_mime_types: frozenset[str] = field(default=DEFAULT_ALLOWED_MIME_TYPES)
    # Embed base64 data URIs instead of file:// links.
    inline_data: bool = False

    def with_changes(self, **changes: Any) -> Configuration:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "folder": self.folder,
            "max_width": self.max_width,
            "allowed_mime_types": sorted(self.allowed_mime_types),
            "inline_data": self.inline_data,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Configuration:
        """Build a configuration from persisted data, tolerating junk.

        Unknown keys are ignored; missing or invalid values fall back to the
        defaults.
        """
        if not isinstance(data, dict):
            return cls()

        enabled = data.get("enabled")
        if not isinstance(enabled, bool):
            enabled = True
        inline_data = data.get("inline_data")
        if not isinstance(inline_data, bool):
            inline_data = False
        max_width = data.get("max_width")
        if not isinstance(max_width, str) or not max_width.strip():
            max_width = DEFAULT_MAX_WIDTH

        mimes = data.get("allowed_mime_types")
        allowed = DEFAULT_ALLOWED_MIME_TYPES
        if isinstance(mimes, (list, tuple, set, frozenset)):
            cleaned = frozenset(str(m).strip().lower() for m in mimes if str(m).strip())
            if cleaned:
                allowed = cleaned

        folder = data.get("folder")
        return cls(
            enabled=enabled,
            folder=normalize_folder(folder) if isinstance(folder, str) else None,
            max_width=max_width.strip(),
            allowed_mime_types=allowed,
            inline_data=inline_data,
        )
