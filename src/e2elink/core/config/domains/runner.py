"""Domain-specific configuration for the external test runner."""
from __future__ import annotations

from functools import cached_property
from typing import Dict, List

from ..base import BaseDomainConfig


class RunnerConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "runner"

    @cached_property
    def manifest_template(self) -> str:
        return str(self.section.get("manifestTemplate") or "runner.manifest.json")

    @cached_property
    def manifest_dir(self) -> str:
        return str(self.section.get("manifestDir") or ".e2elink/runners")

    @cached_property
    def manifest_extension(self) -> str:
        return str(self.section.get("manifestExtension") or "runner.json").lstrip(".")

    @cached_property
    def projects_index(self) -> str:
        return str(self.section.get("projectsIndex") or "projects.json")

    @cached_property
    def config_files(self) -> List[str]:
        return [str(name) for name in (self.section.get("configFiles") or [])]

    @cached_property
    def cwd(self) -> str:
        return str(self.section.get("cwd") or ".")

    @cached_property
    def timeout_seconds(self) -> float:
        return float(self.section.get("timeoutSeconds") or 3600)

    @cached_property
    def commands(self) -> Dict[str, str]:
        raw = self.section.get("commands") or {}
        return {str(k): str(v) for k, v in raw.items()}

    def manifest_name(self, module_name: str) -> str:
        return f"{module_name}.{self.manifest_extension}"


__all__ = ["RunnerConfig"]
