"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from e2elink.core.utils.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Repository root from ``--repo-root`` or auto-detection."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


def get_workspace_path(args: argparse.Namespace, repo_root: Path) -> Optional[Path]:
    """Explicit ``--workspace`` path, resolved against ``repo_root``."""
    raw = getattr(args, "workspace", None)
    if not raw:
        return None
    path = Path(raw).expanduser()
    return path if path.is_absolute() else repo_root / path


__all__ = ["get_repo_root", "get_workspace_path"]
