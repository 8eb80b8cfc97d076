"""
e2elink config show command.

SUMMARY: Show current configuration

Displays the merged configuration from bundled defaults, project overrides
and environment variables.
"""

from __future__ import annotations

import argparse

from e2elink.cli import OutputFormatter, add_standard_flags, get_repo_root
from e2elink.core.config import ConfigManager
from e2elink.core.utils.io import dump_yaml_string

SUMMARY = "Show current configuration"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'composition.pluginName')",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = ConfigManager(get_repo_root(args))
        if args.key:
            value = manager.get(args.key)
            if value is None:
                formatter.error(KeyError(args.key), f"Key not found: {args.key}", error_code="key_not_found")
                return 1
            data = {args.key: value}
        else:
            data = manager.load_config()

        if formatter.json_mode:
            formatter.json_output(data)
        else:
            formatter.text(dump_yaml_string(data).rstrip())
        return 0
    except Exception as e:
        formatter.error(e, error_code="config_error")
        return 1
