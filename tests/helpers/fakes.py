"""Test doubles for the chat host's collaborators."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any


class MemorySettingsStore:
    """Settings store that keeps values in a dict and counts writes."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(initial or {})
        self.set_calls = 0

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.set_calls += 1
        self.data[key] = value


class MemoryMessageStore:
    """Chat messages keyed by id; each message has a text and swipes."""

    def __init__(self) -> None:
        self.texts: dict[int, str] = {}
        self.swipes: dict[int, list[str]] = {}
        self.writes: list[int] = []

    def get_message_text(self, message_id: int) -> str:
        return self.texts[message_id]

    def set_message_text(self, message_id: int, text: str) -> None:
        self.writes.append(message_id)
        self.texts[message_id] = text

    def get_swipes(self, message_id: int) -> list[str]:
        return list(self.swipes.get(message_id, []))

    def set_swipes(self, message_id: int, swipes: list[str]) -> None:
        self.swipes[message_id] = list(swipes)


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def messages(self) -> list[str]:
        return [r.getMessage() for r in self.records]


def make_images(folder: Path, *names: str, payload: bytes = b"img") -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    for name in names:
        (folder / name).write_bytes(payload)
    return folder
