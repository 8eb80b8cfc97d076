"""I/O utilities for writing test files.

All functions create parent directories automatically if they don't exist.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml


def write_yaml(path: Path, data: Any, *, sort_keys: bool = False) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    content = yaml.safe_dump(data, default_flow_style=False, sort_keys=sort_keys, allow_unicode=True)
    path.write_text(content, encoding="utf-8")


def write_json(path: Path, data: Any, *, indent: int = 2, sort_keys: bool = True) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=indent, sort_keys=sort_keys) + "\n", encoding="utf-8")


def write_text(path: Path, content: str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def read_json(path: Path) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def snapshot_tree(root: Path) -> dict[str, str]:
    """Map every entry below ``root`` to its link target or file content.

    Symlinks are recorded, never followed.
    """
    root = Path(root)
    result: dict[str, str] = {}

    def walk(directory: Path) -> None:
        for child in sorted(directory.iterdir(), key=lambda p: p.name):
            rel = child.relative_to(root).as_posix()
            if child.is_symlink():
                result[rel] = f"-> {child.readlink()}"
            elif child.is_dir():
                result[rel + "/"] = ""
                walk(child)
            else:
                result[rel] = child.read_text(encoding="utf-8")

    if root.is_dir():
        walk(root)
    return result
