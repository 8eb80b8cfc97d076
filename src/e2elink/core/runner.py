"""Thin wrapper that starts the external test runner.

Commands come from ``runner.commands`` and are Jinja2 templates. ``all`` and
``project`` run the regular config; ``ci`` and ``ciProject`` run the CI
config. The project variants receive the project name as ``{{ project }}``.
The rendered command is split with shlex and run without a shell.
"""
from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, StrictUndefined

from e2elink.core.config.domains import RunnerConfig
from e2elink.core.exceptions import E2eLinkError

logger = logging.getLogger(__name__)

_env = Environment(undefined=StrictUndefined, autoescape=False)


def command_key(project: Optional[str] = None, *, ci: bool = False) -> str:
    if project is None:
        return "ci" if ci else "all"
    return "ciProject" if ci else "project"


def build_test_command(runner: RunnerConfig, project: Optional[str] = None, *, ci: bool = False) -> List[str]:
    """Render the configured test command as an argv list.

    Raises:
        E2eLinkError: If ``project`` is blank, or the matching command is not
            configured or renders empty.
    """
    key = command_key(project, ci=ci)
    if project is not None and not project.strip():
        raise E2eLinkError("Project name must not be blank", context={"command": key})
    template = runner.commands.get(key)
    if not template:
        raise E2eLinkError(
            f"No test command configured for runner.commands.{key}",
            context={"command": key},
        )
    rendered = _env.from_string(template).render(project=project or "")
    argv = shlex.split(rendered)
    if not argv:
        raise E2eLinkError(f"Test command runner.commands.{key} is empty", context={"command": key})
    return argv


def run_tests(
    host_base: Path, runner: RunnerConfig, project: Optional[str] = None, *, ci: bool = False
) -> int:
    """Run the test command in ``<host_base>/<runner.cwd>``.

    Returns:
        The runner's exit code.
    """
    argv = build_test_command(runner, project, ci=ci)
    cwd = Path(host_base) / runner.cwd
    logger.info("Running %s in %s", shlex.join(argv), cwd)
    try:
        completed = subprocess.run(argv, cwd=str(cwd), timeout=runner.timeout_seconds, check=False)
    except FileNotFoundError as e:
        raise E2eLinkError(f"Test runner not found: {argv[0]}", context={"argv": argv}) from e
    except subprocess.TimeoutExpired as e:
        raise E2eLinkError(
            f"Test run exceeded {runner.timeout_seconds:g}s",
            context={"argv": argv, "timeout": runner.timeout_seconds},
        ) from e
    return completed.returncode


__all__ = ["build_test_command", "command_key", "run_tests"]
