"""
e2elink compose clean command.

SUMMARY: Remove composed test assets and runner manifests
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List

from e2elink.cli import OutputFormatter, add_standard_flags, add_workspace_arg
from e2elink.core.orchestrator import LifecycleEvent

from ._context import build_compose_context

SUMMARY = "Remove composed test assets and runner manifests"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_workspace_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = build_compose_context(args)
        removed: List[Path] = []
        for module in ctx.modules_in_order():
            for result in ctx.bus.emit(LifecycleEvent.WORKSPACE_CLEANED, module):
                removed.extend(result or [])

        formatter.success(
            {"removed": [str(p) for p in removed]},
            f"Removed {len(removed)} composed entr{'y' if len(removed) == 1 else 'ies'}",
        )
        return 0
    except Exception as e:
        formatter.error(e, error_code="clean_error")
        return 1
