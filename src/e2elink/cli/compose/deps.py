"""
e2elink compose deps command.

SUMMARY: List the opted-in transitive dependencies of a module
"""
from __future__ import annotations

import argparse

from e2elink.cli import OutputFormatter, add_standard_flags, add_workspace_arg
from e2elink.core.modules import read_settings

from ._context import build_compose_context

SUMMARY = "List the opted-in transitive dependencies of a module"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "module",
        nargs="?",
        help="Module name (default: the host)",
    )
    add_workspace_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = build_compose_context(args)
        target = ctx.workspace.get(args.module) if args.module else ctx.workspace.host
        plugin_name = ctx.orchestrator.plugin_name
        members = ctx.orchestrator.dependency_set(target)

        entries = []
        for member in members:
            settings = read_settings(member, plugin_name=plugin_name)
            entries.append({"name": member.name, "package": member.package_name, **settings.to_dict()})

        if members:
            lines = [f"{target.name} composes {len(members)} module(s):"]
            lines += [f"  {e['name']} ({e['package']})" for e in entries]
        else:
            lines = [f"No dependency of {target.name} opted into test integration"]
        formatter.success({"module": target.name, "dependencies": entries}, "\n".join(lines))
        return 0
    except Exception as e:
        formatter.error(e, error_code="deps_error")
        return 1
