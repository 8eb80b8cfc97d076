"""Filesystem capability used by composition.

Composition code only talks to a ``FileSystemService``; ``LocalFileSystem``
is the default implementation backed by ``e2elink.core.utils.io``. Tests and
hosts with their own virtual filesystems can pass a different implementation.
"""
from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Any, List, Protocol, runtime_checkable

from e2elink.core.exceptions import ConfigCorruptionError, LinkError
from e2elink.core.utils.io import (
    clear_directory,
    ensure_directory,
    ensure_parent_dir,
    read_json,
    read_text,
    write_json_atomic,
    write_text,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class FileSystemService(Protocol):
    """Filesystem operations needed to compose test assets."""

    def join(self, *parts: os.PathLike[str] | str) -> Path:
        ...

    def exists(self, path: Path) -> bool:
        ...

    def is_dir(self, path: Path) -> bool:
        ...

    def is_file(self, path: Path) -> bool:
        ...

    def is_symlink(self, path: Path) -> bool:
        ...

    def clear_directory(self, path: Path) -> List[Path]:
        """Empty ``path`` without following symlinks; return removed entries."""
        ...

    def copy_file(self, source: Path, destination: Path) -> None:
        ...

    def rename(self, source: Path, destination: Path) -> None:
        """Move ``source`` to ``destination``, replacing an existing file."""
        ...

    def create_dir_link(self, link: Path, target: Path) -> bool:
        """Point ``link`` at directory ``target``.

        Returns False when ``link`` already points at ``target``.

        Raises:
            LinkError: If the link cannot be created.
        """
        ...

    def read_json(self, path: Path) -> Any:
        """Parse a JSON file.

        Raises:
            FileNotFoundError: If the file is missing.
            ConfigCorruptionError: If the file does not parse.
        """
        ...

    def write_json(self, path: Path, data: Any) -> None:
        ...

    def read_text(self, path: Path) -> str:
        ...

    def write_text(self, path: Path, content: str) -> None:
        ...


class LocalFileSystem:
    """``FileSystemService`` over the local disk."""

    def join(self, *parts: os.PathLike[str] | str) -> Path:
        return Path(*parts)

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()

    def is_file(self, path: Path) -> bool:
        return Path(path).is_file()

    def is_symlink(self, path: Path) -> bool:
        return Path(path).is_symlink()

    def clear_directory(self, path: Path) -> List[Path]:
        return clear_directory(Path(path))

    def copy_file(self, source: Path, destination: Path) -> None:
        ensure_parent_dir(Path(destination))
        shutil.copyfile(source, destination)

    def rename(self, source: Path, destination: Path) -> None:
        ensure_parent_dir(Path(destination))
        os.replace(source, destination)

    def create_dir_link(self, link: Path, target: Path) -> bool:
        link = Path(link)
        target = Path(target)

        if link.is_symlink():
            if link.resolve() == target.resolve():
                return False
            link.unlink()
        elif link.exists():
            raise LinkError(
                f"Refusing to replace existing entry with a link: {link}",
                link=str(link),
                target=str(target),
            )

        try:
            ensure_directory(link.parent)
            link.symlink_to(target, target_is_directory=True)
        except OSError as e:
            raise LinkError(
                f"Cannot link {link} -> {target}: {e}",
                link=str(link),
                target=str(target),
            ) from e
        logger.debug("Linked %s -> %s", link, target)
        return True

    def read_json(self, path: Path) -> Any:
        try:
            return read_json(path)
        except ValueError as e:
            raise ConfigCorruptionError(
                f"Cannot parse {path}: {e}", context={"path": str(path)}
            ) from e

    def write_json(self, path: Path, data: Any) -> None:
        write_json_atomic(path, data)

    def read_text(self, path: Path) -> str:
        return read_text(path)

    def write_text(self, path: Path, content: str) -> None:
        write_text(path, content)


__all__ = ["FileSystemService", "LocalFileSystem"]
