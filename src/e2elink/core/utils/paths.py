"""Project root and project config directory resolution."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

PROJECT_CONFIG_DIR = ".e2elink"


class E2eLinkPathError(ValueError):
    """Raised when path resolution fails."""


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Resolve the project root.

    Resolution priority:
    1. ``E2ELINK_PROJECT_ROOT`` environment variable
    2. Nearest ancestor of ``start`` (default: CWD) containing ``.e2elink/``
    3. Nearest ancestor containing ``.git``

    Raises:
        E2eLinkPathError: If the env override is invalid or no root is found
    """
    env_root = os.environ.get("E2ELINK_PROJECT_ROOT")
    if env_root:
        env_path = Path(env_root).expanduser().resolve()
        if not env_path.exists():
            raise E2eLinkPathError(f"E2ELINK_PROJECT_ROOT points at missing path: {env_path}")
        if env_path.name == PROJECT_CONFIG_DIR:
            raise E2eLinkPathError(
                f"E2ELINK_PROJECT_ROOT points to the {PROJECT_CONFIG_DIR} directory: {env_path}. "
                "It must point to the project root."
            )
        return env_path

    origin = (start or Path.cwd()).resolve()
    candidates = [origin, *origin.parents]
    for marker in (PROJECT_CONFIG_DIR, ".git"):
        for candidate in candidates:
            if (candidate / marker).exists():
                return candidate

    raise E2eLinkPathError(
        f"Could not resolve project root from {origin}: no {PROJECT_CONFIG_DIR}/ or .git found"
    )


def get_project_config_dir(repo_root: Path) -> Path:
    """Return ``<repo_root>/.e2elink``."""
    return Path(repo_root) / PROJECT_CONFIG_DIR


__all__ = [
    "PROJECT_CONFIG_DIR",
    "E2eLinkPathError",
    "resolve_project_root",
    "get_project_config_dir",
]
