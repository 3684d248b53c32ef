"""Image Embedder: turn ``[cat.png]`` tags in chat messages into inline images.

Images come from one local folder. The folder is indexed by filename
(case-insensitive) and re-indexed whenever its contents change.
"""

from .config import Configuration
from .errors import ConfigurationError, FileAccessError, ImageEmbedderError, RenderFailure
from .image_index import ImageIndex, ImageRecord, rebuild
from .resolver import resolve, resolve_many

__all__ = [
    "Configuration",
    "ConfigurationError",
    "FileAccessError",
    "ImageEmbedderError",
    "ImageIndex",
    "ImageRecord",
    "RenderFailure",
    "rebuild",
    "resolve",
    "resolve_many",
]
