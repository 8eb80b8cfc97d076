"""Domain-specific configuration for test asset composition."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Dict, Optional

from e2elink.data import get_data_path

from ..base import BaseDomainConfig

DEFAULT_MARKER = "[e2elink] This property was generated by e2elink"


class CompositionConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "composition"

    @cached_property
    def plugin_name(self) -> str:
        return str(self.section.get("pluginName") or "e2elink")

    @cached_property
    def host_test_root(self) -> str:
        return str(self.section.get("hostTestRoot") or "test")

    @cached_property
    def private_test_root(self) -> str:
        return str(self.section.get("privateTestRoot") or ".e2elink/test")

    @cached_property
    def generated_marker(self) -> str:
        return str(self.section.get("generatedMarker") or DEFAULT_MARKER)

    @cached_property
    def alias_template(self) -> str:
        return str(self.section.get("aliasTemplate") or "@{package}/{module}/test")

    @cached_property
    def dependency_section(self) -> str:
        return str(self.section.get("dependencySection") or "devDependencies")

    @cached_property
    def base_packages(self) -> Dict[str, str]:
        raw = self.section.get("basePackages") or {}
        return {str(k): str(v) for k, v in raw.items()}

    @cached_property
    def spec_config_name(self) -> str:
        return str(self.section.get("specConfigName") or "tsconfig.spec.json")

    @cached_property
    def module_spec_config_name(self) -> str:
        return str(self.section.get("moduleSpecConfigName") or "tsconfig.json")

    @cached_property
    def templates_dir(self) -> Path:
        """Directory holding the composition templates.

        Relative overrides resolve against the repo root; an empty value means
        the bundled templates.
        """
        raw: Optional[str] = self.section.get("templatesDir") or None
        if not raw:
            return get_data_path("templates")
        path = Path(raw).expanduser()
        if not path.is_absolute():
            path = self.repo_root / path
        return path

    def alias_key(self, package_name: str, module_name: str) -> str:
        return self.alias_template.format(package=package_name, module=module_name)


__all__ = ["CompositionConfig", "DEFAULT_MARKER"]
