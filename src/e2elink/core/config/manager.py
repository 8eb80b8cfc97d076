"""
e2elink configuration management (layered YAML).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from e2elink.core.schemas import validate_payload
from e2elink.core.utils.io import iter_yaml_files, read_yaml
from e2elink.core.utils.merge import deep_merge as _deep_merge
from e2elink.core.utils.paths import get_project_config_dir, resolve_project_root
from e2elink.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "E2ELINK_"


class ConfigManager:
    """Load, merge, and validate e2elink configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: E2ELINK_<section>__<key>[__<key>...]
    2. Project config: <repo>/.e2elink/config/*.yaml (alphabetical order)
    3. Bundled defaults: e2elink.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = repo_root or resolve_project_root()
        self.core_config_dir = get_data_path("config")
        self.project_config_dir = get_project_config_dir(self.repo_root) / "config"

    def deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge dictionaries. Delegates to shared implementation."""
        return _deep_merge(base, override)

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Configuration must never silently ignore invalid YAML.
        data = read_yaml(path, default={}, raise_on_error=True)
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a YAML mapping: {path}")
        return data

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            cfg = self.deep_merge(cfg, self.load_yaml(path))
        return cfg

    # ---------------------------------------------------------------- env

    def _coerce_type(self, value: str) -> Any:
        s = value.strip()
        low = s.lower()
        if low in {"true", "false"}:
            return low == "true"
        if re.fullmatch(r"[-+]?\d+", s):
            return int(s)
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return s
        return s

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            # Only nested keys are config overrides; E2ELINK_PROJECT_ROOT and
            # friends are handled elsewhere.
            if "__" not in raw:
                continue
            segs = raw.split("__")
            if any(not s for s in segs):
                logger.warning("Ignoring malformed config override %s", key)
                continue
            yield segs, self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for i, part in enumerate(path):
            # Case-insensitive match against existing keys so env vars can
            # address camelCase settings.
            lower_map = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            use_key = lower_map.get(part.lower(), part)
            if i == len(path) - 1:
                cur[use_key] = value
                return
            nxt = cur.get(use_key)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[use_key] = nxt
            cur = nxt

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, value in self._iter_env_overrides():
            self._set_nested(cfg, path, value)

    # ---------------------------------------------------------------- load

    def _load_config_uncached(self, *, validate: bool = True) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.project_config_dir, cfg)
        self.apply_env_overrides(cfg)
        if validate:
            validate_payload(cfg, "config")
        return cfg

    def load_config(self, *, validate: bool = True) -> Dict[str, Any]:
        """Return the merged configuration (cached per repo root)."""
        from .cache import get_cached_config

        return get_cached_config(self.repo_root, validate=validate)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dot-notation key such as ``composition.pluginName``."""
        cur: Any = self.load_config()
        for part in [p for p in key.split(".") if p]:
            if not isinstance(cur, dict) or part not in cur:
                return default
            cur = cur[part]
        return cur


__all__ = ["ConfigManager", "ENV_PREFIX"]
