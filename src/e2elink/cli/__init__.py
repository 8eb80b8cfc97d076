"""
e2elink CLI package.

Provides the command-line interface with auto-discovery of commands
from subfolders (compose/, test/, config/).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter
from ._args import (
    add_dry_run_flag,
    add_json_flag,
    add_repo_root_flag,
    add_standard_flags,
    add_verbose_flag,
    add_workspace_arg,
)
from ._utils import get_repo_root, get_workspace_path

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_dry_run_flag",
    "add_json_flag",
    "add_repo_root_flag",
    "add_standard_flags",
    "add_verbose_flag",
    "add_workspace_arg",
    # Utilities
    "get_repo_root",
    "get_workspace_path",
]
