"""YAML I/O utilities."""
from __future__ import annotations

import fcntl
from pathlib import Path
from typing import Any, Iterator

import yaml

from .core import atomic_write


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML with error handling.

    Returns default if file is missing or invalid, unless raise_on_error is True.

    Examples:
        >>> config = read_yaml(Path("config.yaml"), default={})
        >>> assert isinstance(config, dict)
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                data = yaml.safe_load(f)
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        return data if data is not None else default
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default


def write_yaml(path: Path, data: Any) -> None:
    """Atomically write YAML data to ``path`` with sorted keys."""

    def _writer(f) -> None:
        yaml.safe_dump(
            data,
            f,
            default_flow_style=False,
            sort_keys=True,
            allow_unicode=True,
        )

    atomic_write(Path(path), _writer)


def iter_yaml_files(directory: Path) -> Iterator[Path]:
    """Yield ``*.yaml`` and ``*.yml`` files in ``directory`` in alphabetical order."""
    directory = Path(directory)
    if not directory.is_dir():
        return iter(())
    files = [p for p in directory.iterdir() if p.is_file() and p.suffix in (".yaml", ".yml")]
    return iter(sorted(files, key=lambda p: p.name))


def dump_yaml_string(data: Any) -> str:
    """Dump data to a YAML string with sorted keys."""
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=True, allow_unicode=True)


__all__ = [
    "read_yaml",
    "write_yaml",
    "iter_yaml_files",
    "dump_yaml_string",
]
