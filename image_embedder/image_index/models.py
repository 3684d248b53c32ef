from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class ImageRecord:
    key: str  # lowercase filename with extension
    path: str
    display_name: str
    mime_type: str
    size_bytes: int
    modified_at: float


class ImageIndex(Mapping[str, ImageRecord]):
    """Read-only snapshot of one completed folder scan.

    Lookups lowercase the key, so ``index.lookup("Cat.PNG")`` and
    ``index.lookup("cat.png")`` are the same query. A new scan produces a new
    instance; existing instances never change.
    """

    __slots__ = ("_records", "folder", "generation")

    def __init__(
        self,
        records: Mapping[str, ImageRecord] | None = None,
        folder: str | None = None,
        generation: int = 0,
    ) -> None:
        self._records: Mapping[str, ImageRecord] = MappingProxyType(dict(records or {}))
        self.folder = folder
        self.generation = generation

    @classmethod
    def empty(cls, folder: str | None = None, generation: int = 0) -> ImageIndex:
        return cls({}, folder=folder, generation=generation)

    def lookup(self, name: str) -> ImageRecord | None:
        return self._records.get(name.lower())

    def __getitem__(self, key: str) -> ImageRecord:
        return self._records[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"ImageIndex(folder={self.folder!r}, generation={self.generation}, count={len(self)})"
