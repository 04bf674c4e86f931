"""Tests for webmap.loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from webmap.errors import FileReadError
from webmap.loader import load_many, load_text
from webmap.models import FileRecord


def _records(*paths: str) -> list[FileRecord]:
    return [FileRecord.from_relative(path) for path in paths]


def test_load_text_reads_utf8(tmp_path: Path) -> None:
    (tmp_path / "a.ts").write_text("const café = 1;\n", encoding="utf-8")
    assert load_text(tmp_path, "a.ts") == "const café = 1;\n"


def test_load_text_rejects_binary(tmp_path: Path) -> None:
    (tmp_path / "image.js").write_bytes(b"\xff\xfe\x00\x89PNG")
    with pytest.raises(FileReadError) as excinfo:
        load_text(tmp_path, "image.js")
    assert excinfo.value.path == "image.js"


def test_load_text_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileReadError):
        load_text(tmp_path, "gone.ts")


@pytest.mark.parametrize("concurrency", [1, 4])
def test_load_many_skips_failures_and_keeps_order(tmp_path: Path, concurrency: int) -> None:
    (tmp_path / "a.ts").write_text("a", encoding="utf-8")
    (tmp_path / "bad.ts").write_bytes(b"\xff\xfe\xfa")
    (tmp_path / "c.ts").write_text("c", encoding="utf-8")

    loaded = list(
        load_many(tmp_path, _records("a.ts", "bad.ts", "missing.ts", "c.ts"), concurrency)
    )

    assert [(record.path, text) for record, text in loaded] == [("a.ts", "a"), ("c.ts", "c")]


def test_load_many_handles_empty_input(tmp_path: Path) -> None:
    assert list(load_many(tmp_path, [])) == []
