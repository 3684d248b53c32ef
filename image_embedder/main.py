"""Command-line entry point.

    image-embedder --folder ~/pics "look: [cat.png:50%]"
    echo "[cat.png]" | image-embedder --folder ~/pics
    image-embedder --panel [--settings PATH]
"""

from __future__ import annotations

import argparse
import os
import sys

from image_embedder.config import SETTINGS_KEY, Configuration
from image_embedder.errors import ConfigurationError
from image_embedder.image_index.scanner import rebuild
from image_embedder.logger import get_logger, setup_logger
from image_embedder.path_utils import normalize_folder
from image_embedder.resolver import find_tags, resolve
from image_embedder.settings_manager import SettingsManager, default_settings_path

logger = get_logger("main")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="image-embedder", description="Embed local images into chat text")
    parser.add_argument("text", nargs="*", help="Text to resolve (stdin when omitted)")
    parser.add_argument("--folder", help="Image folder (overrides the saved setting)")
    parser.add_argument("--max-width", help="CSS max-width for tags without a size")
    parser.add_argument("--inline-data", action="store_true", help="Embed base64 data URIs instead of file:// links")
    parser.add_argument("--settings", help="Settings JSON path")
    parser.add_argument("--panel", action="store_true", help="Open the settings panel")
    parser.add_argument("--log-level", help="Set log level")
    parser.add_argument("--log-cats", help="Set log categories")
    return parser.parse_args(argv)


def _apply_logging_options(args: argparse.Namespace) -> None:
    if args.log_level:
        os.environ["IMAGE_EMBEDDER_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["IMAGE_EMBEDDER_LOG_CATS"] = args.log_cats
    setup_logger()


def load_configuration(args: argparse.Namespace) -> Configuration:
    store = SettingsManager(args.settings or default_settings_path())
    config = Configuration.from_dict(store.get(SETTINGS_KEY))
    changes = {}
    if args.folder:
        changes["folder"] = normalize_folder(args.folder)
    if args.max_width:
        changes["max_width"] = args.max_width
    if args.inline_data:
        changes["inline_data"] = True
    return config.with_changes(**changes) if changes else config


def render(args: argparse.Namespace) -> int:
    config = load_configuration(args)
    if not config.folder:
        print("error: no image folder (use --folder)", file=sys.stderr)
        return 2
    try:
        index = rebuild(config.folder, config.allowed_mime_types)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    text = " ".join(args.text) if args.text else sys.stdin.read()
    for name, _size in find_tags(text):
        if index.lookup(name) is None:
            logger.warning("no image for tag: %s", name)
    sys.stdout.write(resolve(text, index, config))
    if args.text:
        sys.stdout.write("\n")
    return 0


def run_panel(args: argparse.Namespace) -> int:
    from PySide6.QtWidgets import QApplication

    from image_embedder.plugin import ImageEmbedder

    app = QApplication.instance() or QApplication(sys.argv[:1])
    store = SettingsManager(args.settings or default_settings_path())
    embedder = ImageEmbedder(store)
    embedder.start()
    panel = embedder.create_settings_panel()
    panel.resize(560, 180)
    panel.show()
    app.aboutToQuit.connect(embedder.shutdown)
    return app.exec()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    _apply_logging_options(args)
    if args.panel:
        return run_panel(args)
    return render(args)


if __name__ == "__main__":
    raise SystemExit(main())
