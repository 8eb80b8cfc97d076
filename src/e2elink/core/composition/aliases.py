"""Path-alias table generation.

Generated aliases live in ``compilerOptions.paths`` and map a key such as
``@pkg/module/test`` to ``[path, marker]``. The marker identifies entries
e2elink owns, so a later pass replaces exactly those and leaves hand-written
aliases in place.
"""
from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterable, List, MutableMapping

from e2elink.core.config.domains import CompositionConfig
from e2elink.core.modules import Module, read_settings

logger = logging.getLogger(__name__)


def alias_path(target: Module, member: Module, shared_helper_path: str, comp: CompositionConfig) -> str:
    """Where ``target`` resolves ``member``'s shared helper.

    The host resolves it relative to its base path inside the host test root.
    Any other module resolves it absolutely inside its private test root.
    """
    if target.is_host:
        return str(
            PurePosixPath(comp.host_test_root, member.package_name, member.name, shared_helper_path)
        )
    return str(
        Path(
            target.src_base_path,
            comp.private_test_root,
            member.package_name,
            member.name,
            shared_helper_path,
        )
    )


def build_alias_entries(
    target: Module, members: Iterable[Module], comp: CompositionConfig
) -> Dict[str, List[str]]:
    """Alias entries for every member that declares a shared helper."""
    marker = comp.generated_marker
    entries: Dict[str, List[str]] = {}
    for member in members:
        settings = read_settings(member, plugin_name=comp.plugin_name)
        if settings is None or not settings.shared_helper_path:
            continue
        key = settings.shared_helper_alias_name or comp.alias_key(member.package_name, member.name)
        if key in entries:
            logger.warning("Alias %s declared by several modules; %s wins", key, member.name)
        entries[key] = [alias_path(target, member, settings.shared_helper_path, comp), marker]
    return entries


def is_generated(value: Any, marker: str) -> bool:
    return isinstance(value, list) and marker in value


def apply_path_aliases(
    document: MutableMapping[str, Any], entries: Dict[str, List[str]], marker: str
) -> MutableMapping[str, Any]:
    """Replace the generated aliases of ``document`` with ``entries``.

    ``document`` is modified in place and returned.
    """
    compiler_options = document.get("compilerOptions")
    if not isinstance(compiler_options, dict):
        compiler_options = {}
        document["compilerOptions"] = compiler_options
    paths = compiler_options.get("paths")
    if not isinstance(paths, dict):
        paths = {}

    kept = {key: value for key, value in paths.items() if not is_generated(value, marker)}
    for key in entries:
        if key in kept:
            logger.debug("Overwriting hand-written alias %s", key)
    kept.update({key: list(value) for key, value in entries.items()})
    compiler_options["paths"] = kept
    return document


__all__ = ["alias_path", "build_alias_entries", "is_generated", "apply_path_aliases"]
