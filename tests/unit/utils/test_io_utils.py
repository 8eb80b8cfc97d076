from __future__ import annotations

import pytest

from e2elink.core.utils.io import clear_directory, read_json, read_yaml
from e2elink.core.utils.io.json import write_json_atomic
from helpers.io_utils import write_text


def test_clear_directory_keeps_link_targets(tmp_path) -> None:
    target = tmp_path / "target"
    write_text(target / "keep.txt", "x")
    root = tmp_path / "root"
    write_text(root / "nested" / "file.txt", "x")
    write_text(root / "file.txt", "x")
    (root / "link").symlink_to(target, target_is_directory=True)

    removed = clear_directory(root)

    assert [p.name for p in removed] == ["file.txt", "link", "nested"]
    assert root.is_dir() and list(root.iterdir()) == []
    assert (target / "keep.txt").exists()


def test_clear_missing_directory(tmp_path) -> None:
    assert clear_directory(tmp_path / "missing") == []


def test_write_json_is_deterministic(tmp_path) -> None:
    path = tmp_path / "out" / "a.json"
    write_json_atomic(path, {"b": 1, "a": [1, 2]})

    assert path.read_text(encoding="utf-8") == '{\n  "a": [\n    1,\n    2\n  ],\n  "b": 1\n}\n'
    assert read_json(path) == {"a": [1, 2], "b": 1}


def test_read_json_default(tmp_path) -> None:
    assert read_json(tmp_path / "missing.json", default={}) == {}
    with pytest.raises(FileNotFoundError):
        read_json(tmp_path / "missing.json")


def test_read_yaml_errors(tmp_path) -> None:
    path = tmp_path / "bad.yaml"
    write_text(path, "a: [unclosed\n")

    assert read_yaml(path, default="fallback") == "fallback"
    with pytest.raises(Exception):
        read_yaml(path, raise_on_error=True)
