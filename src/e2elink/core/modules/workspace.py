"""Workspace manifest loading.

A workspace manifest (``.e2elink/workspace.yaml``) lets the CLI stand in for
the host orchestrator: it declares every module, its paths and its direct
dependencies, and carries each module's test-integration settings. Package
manifests (``package.json``) and build configs (``tsconfig.json``) are read
from each module's base path when present.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from e2elink.core.exceptions import (
    ConfigCorruptionError,
    SettingsValidationError,
    WorkspaceError,
)
from e2elink.core.schemas import validate_payload_safe
from e2elink.core.utils.io import read_json, read_yaml, write_json_atomic
from e2elink.core.utils.paths import PROJECT_CONFIG_DIR, resolve_project_root

from .models import Module
from .optin import DEFAULT_PLUGIN_NAME

logger = logging.getLogger(__name__)

WORKSPACE_FILENAME = "workspace.yaml"
PACKAGE_MANIFEST_NAME = "package.json"
BUILD_CONFIG_NAME = "tsconfig.json"


@dataclass
class Workspace:
    """Modules declared by a workspace manifest, with the host singled out."""

    path: Path
    repo_root: Path
    host: Module
    modules: Dict[str, Module] = field(default_factory=dict)
    _loaded_manifests: Dict[str, Dict[str, Any]] = field(default_factory=dict, repr=False)

    def get(self, name: str) -> Module:
        try:
            return self.modules[name]
        except KeyError:
            raise WorkspaceError(
                f"Unknown module: {name}",
                context={"module": name, "known": sorted(self.modules)},
            ) from None

    def package_manifest_path(self, module: Module) -> Path:
        return module.base_path / PACKAGE_MANIFEST_NAME

    def save_manifests(self) -> List[Path]:
        """Write back package manifests that changed since loading.

        Keys keep the order of the file as loaded; new sections go last.

        Returns:
            Paths of the manifests that were written.
        """
        written: List[Path] = []
        for name, module in self.modules.items():
            if module.package_manifest == self._loaded_manifests.get(name, {}):
                continue
            target = self.package_manifest_path(module)
            write_json_atomic(target, module.package_manifest, sort_keys=False)
            self._loaded_manifests[name] = copy.deepcopy(module.package_manifest)
            logger.info("Wrote package manifest for %s: %s", name, target)
            written.append(target)
        return written


def default_workspace_path(repo_root: Path) -> Path:
    return Path(repo_root) / PROJECT_CONFIG_DIR / WORKSPACE_FILENAME


def _read_json_document(path: Path) -> Dict[str, Any]:
    try:
        data = read_json(path, default={})
    except ValueError as e:
        raise ConfigCorruptionError(
            f"Cannot parse {path}: {e}", context={"path": str(path)}
        ) from e
    if not isinstance(data, dict):
        raise ConfigCorruptionError(
            f"Expected a JSON object in {path}, got {type(data).__name__}",
            context={"path": str(path)},
        )
    return data


def _resolve(repo_root: Path, raw: str) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = repo_root / path
    return path


def _settings_records(name: str, raw: Any) -> List[Mapping[str, Any]]:
    records = raw if isinstance(raw, list) else [raw]
    for index, record in enumerate(records):
        errors = validate_payload_safe(record, "settings")
        if errors:
            raise SettingsValidationError(
                f"Invalid test integration settings for module '{name}': " + "; ".join(errors),
                context={"module": name, "record": index, "errors": errors},
            )
    return records


def load_workspace(
    path: Optional[Path] = None,
    *,
    repo_root: Optional[Path] = None,
    plugin_name: str = DEFAULT_PLUGIN_NAME,
) -> Workspace:
    """Load and validate a workspace manifest.

    Args:
        path: Manifest path. Defaults to ``<repo_root>/.e2elink/workspace.yaml``.
        repo_root: Root that relative module paths resolve against. Defaults
            to the project containing the manifest.
        plugin_name: Settings bag key the module settings are stored under.

    Raises:
        WorkspaceError: If the manifest is missing, malformed, or inconsistent.
        SettingsValidationError: If a settings record violates its schema.
        ConfigCorruptionError: If a module's package.json or tsconfig.json
            does not parse.
    """
    if path is None:
        root = Path(repo_root) if repo_root else resolve_project_root()
        path = default_workspace_path(root)
    path = Path(path)
    if repo_root is None:
        parent = path.resolve().parent
        repo_root = parent.parent if parent.name == PROJECT_CONFIG_DIR else parent
    repo_root = Path(repo_root)

    try:
        data = read_yaml(path, default=None, raise_on_error=True)
    except FileNotFoundError as e:
        raise WorkspaceError(f"Workspace manifest not found: {path}", context={"path": str(path)}) from e
    except yaml.YAMLError as e:
        raise WorkspaceError(f"Cannot parse workspace manifest {path}: {e}", context={"path": str(path)}) from e

    errors = validate_payload_safe(data, "workspace")
    if errors:
        raise WorkspaceError(
            f"Invalid workspace manifest {path}: " + "; ".join(errors),
            context={"path": str(path), "errors": errors},
        )

    modules: Dict[str, Module] = {}
    declared_deps: Dict[str, List[str]] = {}
    loaded: Dict[str, Dict[str, Any]] = {}
    for entry in data["modules"]:
        name = entry["name"]
        if name in modules:
            raise WorkspaceError(f"Duplicate module name: {name}", context={"module": name})

        base_path = _resolve(repo_root, entry["basePath"])
        src_raw = entry.get("srcBasePath")
        plugin_settings: Dict[str, Any] = {}
        if entry.get("settings") is not None:
            plugin_settings[plugin_name] = _settings_records(name, entry["settings"])

        module = Module(
            name=name,
            package_name=entry["package"],
            base_path=base_path,
            src_base_path=_resolve(repo_root, src_raw) if src_raw else None,
            is_host=bool(entry.get("host", False)),
            plugin_settings=plugin_settings,
            package_manifest=_read_json_document(base_path / PACKAGE_MANIFEST_NAME),
            build_config=_read_json_document(base_path / BUILD_CONFIG_NAME),
        )
        modules[name] = module
        declared_deps[name] = list(entry.get("dependencies") or [])
        loaded[name] = copy.deepcopy(module.package_manifest)

    for name, dep_names in declared_deps.items():
        for dep_name in dep_names:
            if dep_name not in modules:
                raise WorkspaceError(
                    f"Module '{name}' depends on unknown module '{dep_name}'",
                    context={"module": name, "dependency": dep_name},
                )
            modules[name].dependencies.append(modules[dep_name])

    hosts = [m for m in modules.values() if m.is_host]
    if len(hosts) != 1:
        raise WorkspaceError(
            f"Workspace must declare exactly one host module, found {len(hosts)}",
            context={"hosts": [m.name for m in hosts]},
        )

    logger.debug("Loaded workspace %s with %d modules", path, len(modules))
    return Workspace(
        path=path,
        repo_root=repo_root,
        host=hosts[0],
        modules=modules,
        _loaded_manifests=loaded,
    )


__all__ = [
    "Workspace",
    "WORKSPACE_FILENAME",
    "default_workspace_path",
    "load_workspace",
]
