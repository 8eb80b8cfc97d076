"""Module graph and composition data models.

``Module`` mirrors a host-owned record: e2elink keeps references to the
host's instances and only mutates ``package_manifest`` and ``build_config``.
The remaining models are immutable value objects.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional


@dataclass(eq=False)
class Module:
    """A node of the host's module dependency graph.

    Attributes:
        name: Stable module name, unique within a workspace
        package_name: Name of the owning package
        base_path: Absolute module base path
        src_base_path: Absolute source base path
        is_host: Whether this module is the composition root
        dependencies: Direct dependencies, in declaration order
        plugin_settings: Settings bag, keyed by plugin name
        package_manifest: Parsed package manifest (mutated in place)
        build_config: Path resolution config, e.g. a parsed tsconfig (mutated in place)
    """

    name: str
    package_name: str
    base_path: Path
    src_base_path: Optional[Path] = None
    is_host: bool = False
    dependencies: List["Module"] = field(default_factory=list)
    plugin_settings: Dict[str, Any] = field(default_factory=dict)
    package_manifest: Dict[str, Any] = field(default_factory=dict)
    build_config: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.base_path = Path(self.base_path)
        self.src_base_path = Path(self.src_base_path) if self.src_base_path else self.base_path

    def __repr__(self) -> str:
        deps = ", ".join(d.name for d in self.dependencies)
        return f"Module(name={self.name!r}, package={self.package_name!r}, host={self.is_host}, deps=[{deps}])"


@dataclass(frozen=True, slots=True)
class TestIntegrationSettings:
    """Per-module opt-in record.

    Attributes:
        test_directory_path: Test sources, relative to the module base path
        shared_helper_path: Shared-helper entry file, relative to the base path
        shared_helper_alias_name: Override for the generated alias key
        extra_packages: Additional runner packages (name -> version range)
        configured: True once at least one path field is set
    """

    __test__ = False  # keep pytest from collecting this class

    test_directory_path: Optional[str] = None
    shared_helper_path: Optional[str] = None
    shared_helper_alias_name: Optional[str] = None
    extra_packages: Mapping[str, str] = field(default_factory=dict)
    configured: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TestIntegrationSettings:
        """Create settings from a raw settings record.

        ``configured`` is derived from the path fields when the record does
        not carry it explicitly.
        """
        test_dir = _clean_str(data.get("testDirectoryPath"))
        helper = _clean_str(data.get("sharedHelperPath"))
        alias = _clean_str(data.get("sharedHelperAliasName"))
        extras = data.get("extraPackages") or {}
        if "configured" in data and data.get("configured") is not None:
            configured = bool(data.get("configured"))
        else:
            configured = bool(test_dir or helper)
        return cls(
            test_directory_path=test_dir,
            shared_helper_path=helper,
            shared_helper_alias_name=alias,
            extra_packages={str(k): str(v) for k, v in dict(extras).items()},
            configured=configured,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"configured": self.configured}
        if self.test_directory_path is not None:
            result["testDirectoryPath"] = self.test_directory_path
        if self.shared_helper_path is not None:
            result["sharedHelperPath"] = self.shared_helper_path
        if self.shared_helper_alias_name is not None:
            result["sharedHelperAliasName"] = self.shared_helper_alias_name
        if self.extra_packages:
            result["extraPackages"] = dict(self.extra_packages)
        return result


def _clean_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


class LinkKind(str, Enum):
    TEST_DIR = "test-dir"
    SHARED_HELPER = "shared-helper"


@dataclass(frozen=True, slots=True)
class LinkEntry:
    """A planned directory link.

    Attributes:
        source: Directory the link points at
        destination: Link path inside the composition root
        kind: What is being linked
        module_name: Module contributing the source
    """

    source: Path
    destination: Path
    kind: LinkKind
    module_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": str(self.source),
            "destination": str(self.destination),
            "kind": self.kind.value,
            "module": self.module_name,
        }


class LinkStatus(str, Enum):
    LINKED = "linked"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class LinkResult:
    entry: LinkEntry
    status: LinkStatus
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not LinkStatus.FAILED


@dataclass
class CompositionReport:
    """Outcome of one composition pass over a composition root."""

    root: Path
    removed: List[Path] = field(default_factory=list)
    results: List[LinkResult] = field(default_factory=list)

    def add(self, result: LinkResult) -> None:
        self.results.append(result)

    def by_status(self, status: LinkStatus) -> List[LinkResult]:
        return [r for r in self.results if r.status is status]

    @property
    def failed(self) -> List[LinkResult]:
        return self.by_status(LinkStatus.FAILED)

    @property
    def degraded(self) -> bool:
        """True when at least one link could not be applied."""
        return bool(self.failed)

    def extend(self, other: CompositionReport) -> None:
        self.removed.extend(other.removed)
        self.results.extend(other.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": str(self.root),
            "removed": [str(p) for p in self.removed],
            "links": [
                {**r.entry.to_dict(), "status": r.status.value, **({"error": r.error} if r.error else {})}
                for r in self.results
            ],
            "degraded": self.degraded,
        }


__all__ = [
    "Module",
    "TestIntegrationSettings",
    "LinkKind",
    "LinkEntry",
    "LinkStatus",
    "LinkResult",
    "CompositionReport",
]
