"""Domain-specific configuration for e2elink logging."""

from __future__ import annotations

from functools import cached_property
from pathlib import Path

from ..base import BaseDomainConfig


class LoggingConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "logging"

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level") or "INFO").upper()

    @cached_property
    def path(self) -> Path | None:
        raw = str(self.section.get("path") or "").strip()
        if not raw:
            return None
        p = Path(raw).expanduser()
        if not p.is_absolute():
            p = self.repo_root / p
        return p.resolve()


__all__ = ["LoggingConfig"]
