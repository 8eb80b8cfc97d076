from __future__ import annotations

import logging
import sys
from pathlib import Path

from e2elink.core.utils.io import ensure_directory

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIGURED_LOG_PATH: str | None = None
_FILE_HANDLER: logging.Handler | None = None
_CONSOLE_HANDLER: logging.Handler | None = None
_JSON_MODE_NULL_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, log_path: Path, level: str = "INFO") -> None:
    """Configure stdlib logging to write to ``log_path``.

    Idempotent per-process: if already configured for the same file, no-op.
    """
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER

    resolved = str(Path(log_path).resolve())
    if _CONFIGURED_LOG_PATH == resolved and _FILE_HANDLER is not None:
        return

    ensure_directory(Path(resolved).parent)

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    # Replace our own file handler when switching paths.
    if _FILE_HANDLER is not None:
        root.removeHandler(_FILE_HANDLER)
        _FILE_HANDLER.close()
        _FILE_HANDLER = None

    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(_level_from_name(level))
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(fh)

    _FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def configure_console_logging(level: str = "INFO") -> None:
    """Install (or retune) a single stderr handler on the root logger."""
    global _CONSOLE_HANDLER

    root = logging.getLogger()
    lvl = _level_from_name(level)
    if root.level == logging.NOTSET or root.level > lvl:
        root.setLevel(lvl)

    if _CONSOLE_HANDLER is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
        _CONSOLE_HANDLER = handler
    _CONSOLE_HANDLER.setLevel(lvl)


def suppress_lastresort_in_json_mode() -> None:
    """Keep WARNING+ records from reaching stderr via ``logging.lastResort``.

    JSON CLI output must stay machine-readable, so make sure the root logger
    has at least a NullHandler when nothing else is installed.
    """
    global _JSON_MODE_NULL_HANDLER

    root = logging.getLogger()
    if root.handlers or _JSON_MODE_NULL_HANDLER is not None:
        return
    _JSON_MODE_NULL_HANDLER = logging.NullHandler()
    root.addHandler(_JSON_MODE_NULL_HANDLER)


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove handlers installed by this module."""
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER, _CONSOLE_HANDLER, _JSON_MODE_NULL_HANDLER
    root = logging.getLogger()
    for h in (_FILE_HANDLER, _CONSOLE_HANDLER, _JSON_MODE_NULL_HANDLER):
        if h is not None:
            root.removeHandler(h)
            h.close()
    _CONFIGURED_LOG_PATH = None
    _FILE_HANDLER = None
    _CONSOLE_HANDLER = None
    _JSON_MODE_NULL_HANDLER = None


__all__ = [
    "configure_stdlib_logging",
    "configure_console_logging",
    "suppress_lastresort_in_json_mode",
    "reset_stdlib_logging_for_tests",
]
