from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from .config import Configuration
from .image_index.models import ImageIndex
from .logger import get_logger
from .resolver import resolve, resolve_many

_logger = get_logger("message_hook")


class MessageStore(Protocol):
    """The part of the host chat pipeline the hook needs."""

    def get_message_text(self, message_id: Any) -> str: ...

    def set_message_text(self, message_id: Any, text: str) -> None: ...

    def get_swipes(self, message_id: Any) -> list[str]: ...

    def set_swipes(self, message_id: Any, swipes: list[str]) -> None: ...


class MessageHook:
    """Handlers for the host's "message received" and "message regenerated" events.

    The index and configuration are read through callables at event time so
    each message sees the latest published snapshot. Failures are logged and
    swallowed here: a broken image folder must never break chat rendering.
    """

    def __init__(
        self,
        store: MessageStore,
        index_provider: Callable[[], ImageIndex],
        config_provider: Callable[[], Configuration],
    ) -> None:
        self._store = store
        self._index_provider = index_provider
        self._config_provider = config_provider

    def on_message_received(self, message_id: Any) -> bool:
        """Rewrite the message text in place. Returns True if it changed."""
        config = self._config_provider()
        if not config.enabled:
            return False
        try:
            text = self._store.get_message_text(message_id)
            if not isinstance(text, str):
                return False
            new_text = resolve(text, self._index_provider(), config)
            if new_text == text:
                return False
            self._store.set_message_text(message_id, new_text)
            return True
        except Exception:
            _logger.exception("embedding images in message %r failed", message_id)
            return False

    def on_message_swiped(self, message_id: Any) -> bool:
        """Rewrite every alternate text of a regenerated message."""
        config = self._config_provider()
        if not config.enabled:
            return False
        try:
            swipes = list(self._store.get_swipes(message_id) or [])
            index = self._index_provider()
            new_swipes = resolve_many(swipes, index, config)
            changed = new_swipes != swipes
            if changed:
                self._store.set_swipes(message_id, new_swipes)
            # The visible text is one of the swipes but is stored separately by the host.
            return self.on_message_received(message_id) or changed
        except Exception:
            _logger.exception("embedding images in swipes of %r failed", message_id)
            return False
