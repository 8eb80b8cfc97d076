"""I/O utilities for e2elink.

This package provides safe, atomic file operations:
- Core: atomic writes, directory management, text I/O
- JSON: read/write with advisory locks
- YAML: read/write helpers for configuration files
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    clear_directory,
    ensure_directory,
    ensure_parent_dir,
    read_text,
    write_text,
)
from .json import (
    read_json,
    write_json_atomic,
    dump_json_string,
)
from .yaml import (
    dump_yaml_string,
    iter_yaml_files,
    read_yaml,
    write_yaml,
)

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "clear_directory",
    "atomic_write",
    "read_text",
    "write_text",
    # json
    "read_json",
    "write_json_atomic",
    "dump_json_string",
    # yaml
    "read_yaml",
    "write_yaml",
    "iter_yaml_files",
    "dump_yaml_string",
]
