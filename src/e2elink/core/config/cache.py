"""Centralized configuration caching.

Provides a single source of truth for loaded configuration across all domain
configs. The cache key includes the project root, ``E2ELINK_*`` environment
overrides and project config file mtimes so edits are picked up.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, Optional

_config_cache: Dict[str, Dict[str, Any]] = {}


def _normalize_repo_root(repo_root: Optional[Path]) -> Path:
    if repo_root is None:
        from e2elink.core.utils.paths import resolve_project_root

        return resolve_project_root()
    return Path(repo_root).expanduser().resolve()


def _cache_key(repo_root: Path, validate: bool) -> str:
    env_items = sorted(
        (k, os.environ.get(k, "")) for k in os.environ.keys() if k.startswith("E2ELINK_")
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    from e2elink.core.utils.io import iter_yaml_files
    from e2elink.core.utils.paths import get_project_config_dir

    files = []
    for p in iter_yaml_files(get_project_config_dir(repo_root) / "config"):
        st = p.stat()
        files.append((p.name, int(st.st_mtime_ns), int(st.st_size)))
    cfg_fp = hashlib.sha256(repr(files).encode("utf-8")).hexdigest()[:12]

    return f"{repo_root}:validate={int(validate)}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(repo_root: Optional[Path] = None, validate: bool = True) -> Dict[str, Any]:
    """Get configuration with caching.

    Returns the same dict instance for the same inputs; treat it as immutable.
    """
    normalized_root = _normalize_repo_root(repo_root)
    key = _cache_key(normalized_root, validate)
    if key not in _config_cache:
        from .manager import ConfigManager

        manager = ConfigManager(repo_root=normalized_root)
        _config_cache[key] = manager._load_config_uncached(validate=validate)
    return _config_cache[key]


def clear_all_caches() -> None:
    """Clear all configuration caches."""
    _config_cache.clear()


__all__ = ["get_cached_config", "clear_all_caches"]
