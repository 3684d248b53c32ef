from __future__ import annotations

from pathlib import Path

import pytest

from image_embedder.config import Configuration
from image_embedder.image_index.mime_types import DEFAULT_ALLOWED_MIME_TYPES
from image_embedder.image_index.models import ImageIndex
from image_embedder.image_index.scanner import rebuild
from image_embedder.message_hook import MessageHook
from image_embedder.resolver import resolve
from tests.helpers.fakes import MemoryMessageStore, make_images


@pytest.fixture
def index(tmp_path: Path) -> ImageIndex:
    make_images(tmp_path, "cat.png")
    return rebuild(tmp_path, DEFAULT_ALLOWED_MIME_TYPES)


def _hook(store, index, config=None) -> MessageHook:
    cfg = config or Configuration()
    return MessageHook(store, lambda: index, lambda: cfg)


def test_received_message_is_rewritten(index: ImageIndex) -> None:
    store = MemoryMessageStore()
    store.texts[1] = "hi [cat.png:40%]"

    assert _hook(store, index).on_message_received(1) is True

    assert store.texts[1] == resolve("hi [cat.png:40%]", index, Configuration())
    assert store.writes == [1]


def test_message_without_hits_is_not_written(index: ImageIndex) -> None:
    store = MemoryMessageStore()
    store.texts[1] = "hi [dog.png]"

    assert _hook(store, index).on_message_received(1) is False

    assert store.writes == []
    assert store.texts[1] == "hi [dog.png]"


def test_disabled_plugin_leaves_messages_alone(index: ImageIndex) -> None:
    store = MemoryMessageStore()
    store.texts[1] = "[cat.png]"

    hook = _hook(store, index, Configuration(enabled=False))

    assert hook.on_message_received(1) is False
    assert hook.on_message_swiped(1) is False
    assert store.texts[1] == "[cat.png]"


def test_swipes_are_rewritten_in_order(index: ImageIndex) -> None:
    store = MemoryMessageStore()
    store.texts[7] = "[cat.png]"
    store.swipes[7] = ["first", "[cat.png]", "[CAT.png:5%]"]
    cfg = Configuration()

    assert _hook(store, index).on_message_swiped(7) is True

    assert store.swipes[7] == ["first", resolve("[cat.png]", index, cfg), resolve("[cat.png:5%]", index, cfg)]
    assert store.texts[7] == resolve("[cat.png]", index, cfg)


def test_host_errors_do_not_escape(index: ImageIndex) -> None:
    class BrokenStore(MemoryMessageStore):
        def get_message_text(self, message_id):
            raise KeyError(message_id)

        def get_swipes(self, message_id):
            raise RuntimeError("no swipes")

    hook = _hook(BrokenStore(), index)

    assert hook.on_message_received(99) is False
    assert hook.on_message_swiped(99) is False


def test_hook_reads_latest_index(tmp_path: Path) -> None:
    store = MemoryMessageStore()
    current = {"index": ImageIndex.empty()}
    hook = MessageHook(store, lambda: current["index"], Configuration)

    store.texts[1] = "[cat.png]"
    assert hook.on_message_received(1) is False

    make_images(tmp_path, "cat.png")
    current["index"] = rebuild(tmp_path, DEFAULT_ALLOWED_MIME_TYPES)
    assert hook.on_message_received(1) is True
