from __future__ import annotations

import io
import json
from pathlib import Path

from image_embedder import main as main_mod
from tests.helpers.fakes import make_images


def test_cli_resolves_text_argument(tmp_path: Path, capsys) -> None:
    pics = make_images(tmp_path / "pics", "cat.png")

    rc = main_mod.main(["--settings", str(tmp_path / "s.json"), "--folder", str(pics), "hi", "[CAT.png:50%]"])

    out = capsys.readouterr().out
    assert rc == 0
    assert out.startswith('hi <img src="file://')
    assert 'style="width: 50%"' in out


def test_cli_reads_stdin(tmp_path: Path, capsys, monkeypatch) -> None:
    pics = make_images(tmp_path / "pics", "cat.png")
    monkeypatch.setattr("sys.stdin", io.StringIO("[cat.png] [dog.png]"))

    rc = main_mod.main(["--settings", str(tmp_path / "s.json"), "--folder", str(pics), "--max-width", "9em"])

    out = capsys.readouterr().out
    assert rc == 0
    assert 'style="max-width: 9em"' in out
    assert out.endswith(" [dog.png]")


def test_cli_uses_saved_folder(tmp_path: Path, capsys) -> None:
    pics = make_images(tmp_path / "pics", "cat.png")
    settings = tmp_path / "s.json"
    settings.write_text(json.dumps({"image_embedder": {"folder": str(pics)}}), encoding="utf-8")

    rc = main_mod.main(["--settings", str(settings), "--inline-data", "[cat.png]"])

    assert rc == 0
    assert 'src="data:image/png;base64,' in capsys.readouterr().out


def test_cli_missing_folder_fails(tmp_path: Path, capsys) -> None:
    rc = main_mod.main(["--settings", str(tmp_path / "s.json"), "--folder", str(tmp_path / "nope"), "[a.png]"])

    assert rc == 2
    assert "folder missing" in capsys.readouterr().err


def test_cli_without_folder_fails(tmp_path: Path, capsys) -> None:
    rc = main_mod.main(["--settings", str(tmp_path / "s.json"), "[a.png]"])

    assert rc == 2
    assert "no image folder" in capsys.readouterr().err
