"""e2elink configuration package.

Layered YAML configuration (bundled defaults, project overrides, environment
variables) with schema validation and typed domain accessors.
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config
from .manager import ConfigManager

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "clear_all_caches",
    "get_cached_config",
]
