"""Opt-in filtering over the module graph.

A module opts into test integration through the entry for the plugin name
in its settings bag. The entry is either a single record or a list of
records; for a list the first configured record wins. Absent and
unconfigured records are opt-outs, never errors.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .graph import collect_dependencies
from .models import Module, TestIntegrationSettings

logger = logging.getLogger(__name__)

DEFAULT_PLUGIN_NAME = "e2elink"


def _raw_records(module: Module, plugin_name: str) -> List[Mapping[str, Any]]:
    raw = (module.plugin_settings or {}).get(plugin_name)
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        return [raw]
    if isinstance(raw, (list, tuple)):
        return [r for r in raw if isinstance(r, Mapping)]
    logger.debug("Ignoring non-mapping settings for %s on module %s", plugin_name, module.name)
    return []


def read_settings(
    module: Module, *, plugin_name: str = DEFAULT_PLUGIN_NAME
) -> Optional[TestIntegrationSettings]:
    """Return the configured settings record of ``module`` or None."""
    for raw in _raw_records(module, plugin_name):
        settings = TestIntegrationSettings.from_dict(raw)
        if settings.configured:
            return settings
    return None


def is_opted_in(module: Module, *, plugin_name: str = DEFAULT_PLUGIN_NAME) -> bool:
    return read_settings(module, plugin_name=plugin_name) is not None


def filter_opted_in(
    modules: Iterable[Module], *, plugin_name: str = DEFAULT_PLUGIN_NAME
) -> List[Module]:
    """Keep the modules carrying a configured settings record, in order."""
    return [m for m in modules if is_opted_in(m, plugin_name=plugin_name)]


def dependency_set(module: Module, *, plugin_name: str = DEFAULT_PLUGIN_NAME) -> List[Module]:
    """Opted-in transitive dependencies of ``module`` in first-discovery order.

    Raises:
        DependencyCycleError: If the dependency graph is cyclic.
    """
    return filter_opted_in(collect_dependencies(module.dependencies), plugin_name=plugin_name)


def declared_extra_packages(
    module: Module, *, plugin_name: str = DEFAULT_PLUGIN_NAME
) -> Dict[str, str]:
    """Extra packages declared by ``module`` itself.

    Read regardless of ``configured``: a host commonly declares extra runner
    packages without declaring any test paths. With several records, later
    records override earlier ones.
    """
    extras: Dict[str, str] = {}
    for raw in _raw_records(module, plugin_name):
        extras.update(TestIntegrationSettings.from_dict(raw).extra_packages)
    return extras


__all__ = [
    "DEFAULT_PLUGIN_NAME",
    "read_settings",
    "is_opted_in",
    "filter_opted_in",
    "dependency_set",
    "declared_extra_packages",
]
