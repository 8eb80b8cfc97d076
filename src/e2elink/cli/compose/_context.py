"""Shared setup for compose commands.

The CLI stands in for the host: it loads the workspace manifest, wires a
``CompositionOrchestrator`` into an in-process event bus and emits the
lifecycle events itself.
"""
from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import List

from e2elink.cli._utils import get_repo_root, get_workspace_path
from e2elink.core.modules import Module, ModuleGraph
from e2elink.core.modules.workspace import Workspace, load_workspace
from e2elink.core.orchestrator import CompositionOrchestrator, HostEventBus, InitGuard


@dataclass
class ComposeContext:
    repo_root: Path
    workspace: Workspace
    bus: HostEventBus
    orchestrator: CompositionOrchestrator

    def modules_in_order(self) -> List[Module]:
        """Modules reachable from the host, dependencies first, host last."""
        order = ModuleGraph(self.workspace.host).dependency_order()
        return [self.workspace.get(name) for name in order]


def build_compose_context(args: argparse.Namespace) -> ComposeContext:
    repo_root = get_repo_root(args)
    orchestrator = CompositionOrchestrator(InitGuard(), repo_root=repo_root)
    workspace = load_workspace(
        get_workspace_path(args, repo_root),
        repo_root=repo_root,
        plugin_name=orchestrator.plugin_name,
    )
    bus = HostEventBus()
    orchestrator.on_init(bus)
    orchestrator.host_module = workspace.host
    return ComposeContext(repo_root=repo_root, workspace=workspace, bus=bus, orchestrator=orchestrator)


__all__ = ["ComposeContext", "build_compose_context"]
