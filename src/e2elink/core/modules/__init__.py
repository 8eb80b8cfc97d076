"""Module graph, opt-in filtering and workspace loading."""
from __future__ import annotations

from .graph import ModuleGraph, collect_dependencies
from .models import (
    CompositionReport,
    LinkEntry,
    LinkKind,
    LinkResult,
    LinkStatus,
    Module,
    TestIntegrationSettings,
)
from .optin import (
    DEFAULT_PLUGIN_NAME,
    declared_extra_packages,
    dependency_set,
    filter_opted_in,
    is_opted_in,
    read_settings,
)

__all__ = [
    "CompositionReport",
    "DEFAULT_PLUGIN_NAME",
    "LinkEntry",
    "LinkKind",
    "LinkResult",
    "LinkStatus",
    "Module",
    "ModuleGraph",
    "TestIntegrationSettings",
    "collect_dependencies",
    "declared_extra_packages",
    "dependency_set",
    "filter_opted_in",
    "is_opted_in",
    "read_settings",
]
