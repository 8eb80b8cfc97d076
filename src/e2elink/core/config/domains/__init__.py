"""Domain-specific configuration accessors.

Available domain configs:
- CompositionConfig: composition roots, alias format, base packages, templates
- RunnerConfig: runner manifest layout and test commands
- LoggingConfig: log level and optional log file

Usage:
    from e2elink.core.config.domains import CompositionConfig

    comp = CompositionConfig(repo_root=Path("/path/to/project"))
    comp.host_test_root
"""
from __future__ import annotations

from .composition import CompositionConfig
from .logging import LoggingConfig
from .runner import RunnerConfig

__all__: list[str] = [
    "CompositionConfig",
    "LoggingConfig",
    "RunnerConfig",
]
