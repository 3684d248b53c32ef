"""Image index: folder scanning and the live filename -> image lookup.

Usage:
    from image_embedder.image_index import ImageIndexManager

    manager = ImageIndexManager()
    manager.scan_complete.connect(on_scan_complete)
    manager.configure("/path/to/images", {"image/png", "image/webp"})
    record = manager.lookup("cat.png")
"""

from .index_manager import ImageIndexManager
from .mime_types import DEFAULT_ALLOWED_MIME_TYPES, infer_mime_type
from .models import ImageIndex, ImageRecord
from .scanner import rebuild

__all__ = [
    "DEFAULT_ALLOWED_MIME_TYPES",
    "ImageIndex",
    "ImageIndexManager",
    "ImageRecord",
    "infer_mime_type",
    "rebuild",
]
