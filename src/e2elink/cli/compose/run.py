"""
e2elink compose run command.

SUMMARY: Compose test assets and generated config for the whole workspace

Emits every lifecycle event for every module reachable from the host
(dependencies first, host last), then writes changed package manifests.
"""
from __future__ import annotations

import argparse
from typing import Any, Dict, List

from e2elink.cli import OutputFormatter, add_standard_flags, add_workspace_arg
from e2elink.core.modules import CompositionReport
from e2elink.core.orchestrator import LifecycleEvent

from ._context import build_compose_context

SUMMARY = "Compose test assets and generated config for the whole workspace"

COMPOSE_SEQUENCE = (
    LifecycleEvent.WORKSPACE_CLEANED,
    LifecycleEvent.ASSETS_COMPOSED,
    LifecycleEvent.PATH_CONFIG_ADJUSTED,
    LifecycleEvent.PACKAGES_ABOUT_TO_INSTALL,
)


def register_args(parser: argparse.ArgumentParser) -> None:
    add_workspace_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = build_compose_context(args)
        modules = ctx.modules_in_order()

        reports: List[CompositionReport] = []
        aliases: Dict[str, Any] = {}
        for event in COMPOSE_SEQUENCE:
            for module in modules:
                for result in ctx.bus.emit(event, module):
                    if isinstance(result, CompositionReport):
                        reports.append(result)
                    elif event is LifecycleEvent.PATH_CONFIG_ADJUSTED and result:
                        aliases[module.name] = result

        written = ctx.workspace.save_manifests()
        degraded = any(r.degraded for r in reports)

        lines = [f"Composed {len(modules)} module(s) for host {ctx.workspace.host.name}"]
        for report in reports:
            for link in report.to_dict()["links"]:
                lines.append(f"  {link['status']:<9} {link['destination']} -> {link['source']}")
        for path in written:
            lines.append(f"  updated {path}")
        if degraded:
            lines.append("Some links could not be created; see the log for details.")

        formatter.success(
            {
                "host": ctx.workspace.host.name,
                "modules": [m.name for m in modules],
                "reports": [r.to_dict() for r in reports],
                "aliases": aliases,
                "manifests": [str(p) for p in written],
                "degraded": degraded,
            },
            "\n".join(lines),
            status="degraded" if degraded else "success",
        )
        return 0
    except Exception as e:
        formatter.error(e, error_code="compose_error")
        return 1
