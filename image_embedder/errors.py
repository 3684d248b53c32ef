"""Exception types raised by the image index.

Tag lookups that miss are not errors and have no exception type; the
resolver leaves such tags as literal text.
"""

from __future__ import annotations


class ImageEmbedderError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(ImageEmbedderError):
    """The image folder is missing, not a directory, or unreadable.

    Raised by a rebuild; the index manager keeps its previous index and reports
    the message through its status line.
    """

    def __init__(self, message: str, folder: str | None = None) -> None:
        super().__init__(message)
        self.folder = folder


class FileAccessError(ImageEmbedderError):
    """A single folder entry could not be inspected during a scan."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class RenderFailure(ImageEmbedderError):
    """Image bytes could not be read while rendering a tag.

    The resolver turns this into an inline placeholder; it never reaches the host.
    """
