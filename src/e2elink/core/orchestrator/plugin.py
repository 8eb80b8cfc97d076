"""Lifecycle-driven composition of end-to-end test assets.

The orchestrator reacts to host lifecycle events. On every event it derives
the opted-in dependency set from the current module graph and regenerates
its links and configuration from scratch.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from e2elink.core.composition import AssetLinker, ConfigSynthesizer, plan_shared_helper_links
from e2elink.core.config.domains import CompositionConfig, RunnerConfig
from e2elink.core.exceptions import E2eLinkError
from e2elink.core.fs import FileSystemService, LocalFileSystem
from e2elink.core.modules import (
    CompositionReport,
    Module,
    dependency_set,
    is_opted_in,
    read_settings,
)
from e2elink.core.runner import run_tests

from .events import HostEvents, InitGuard, LifecycleEvent

logger = logging.getLogger(__name__)


class CompositionOrchestrator:
    """Connects host lifecycle events to linking and config synthesis.

    Args:
        guard: One-time registration guard shared by every instance that must
            register listeners at most once.
        repo_root: Project root used for configuration lookup.
        config: Already merged configuration; skips loading when given.
        fs: Filesystem service; defaults to the local disk.
    """

    def __init__(
        self,
        guard: InitGuard,
        *,
        repo_root: Optional[Path] = None,
        config: Optional[Dict[str, Any]] = None,
        fs: Optional[FileSystemService] = None,
    ) -> None:
        self.guard = guard
        self.composition = CompositionConfig(repo_root=repo_root, config=config)
        self.runner = RunnerConfig(repo_root=repo_root, config=config)
        self.fs = fs or LocalFileSystem()
        self.linker = AssetLinker(self.fs)
        self.synthesizer = ConfigSynthesizer(self.composition, self.runner, self.fs)
        self.host_module: Optional[Module] = None

    @property
    def plugin_name(self) -> str:
        return self.composition.plugin_name

    @property
    def initialized(self) -> bool:
        return self.guard.claimed

    def on_init(self, host: HostEvents) -> None:
        """Register commands, and event listeners the first time only."""
        host.register_command_handler("test", self.run_all_tests)
        host.register_command_handler("test-p", self.run_project_tests)
        host.register_command_handler("test-ci", self.run_all_ci_tests)
        host.register_command_handler("test-ci-p", self.run_project_ci_tests)

        if not self.guard.claim():
            logger.debug("Event listeners already registered; skipping")
            return
        host.register_event_listener(LifecycleEvent.WORKSPACE_CLEANED, self.on_workspace_cleaned)
        host.register_event_listener(LifecycleEvent.ASSETS_COMPOSED, self.on_assets_composed)
        host.register_event_listener(LifecycleEvent.PATH_CONFIG_ADJUSTED, self.on_path_config_adjusted)
        host.register_event_listener(LifecycleEvent.DEPENDENCIES_ABOUT_TO_MERGE, self.on_dependencies)
        host.register_event_listener(LifecycleEvent.PACKAGES_ABOUT_TO_INSTALL, self.on_dependencies)

    def host_test_root(self, host: Module) -> Path:
        return self.fs.join(host.base_path, self.composition.host_test_root)

    def private_test_root(self, module: Module) -> Path:
        return self.fs.join(module.src_base_path, self.composition.private_test_root)

    def dependency_set(self, module: Module) -> List[Module]:
        return dependency_set(module, plugin_name=self.plugin_name)

    def _remember(self, module: Module) -> None:
        if module.is_host:
            self.host_module = module

    def on_workspace_cleaned(self, module: Optional[Module]) -> Optional[List[Path]]:
        if module is None:
            return None
        self._remember(module)
        if module.is_host:
            removed = self.linker.clean(self.host_test_root(module))
            removed += self.synthesizer.clean_manifests(module)
            return removed
        if is_opted_in(module, plugin_name=self.plugin_name):
            return self.linker.clean(self.private_test_root(module))
        return None

    def on_assets_composed(self, module: Optional[Module]) -> Optional[CompositionReport]:
        if module is None or not module.is_host:
            return None
        self._remember(module)
        members = self.dependency_set(module)
        if not members:
            logger.debug("No dependency of %s opted into test integration", module.name)
            return None

        report = self.linker.compose(self.host_test_root(module), members, plugin_name=self.plugin_name)
        self.synthesizer.write_runner_manifests(module, members)
        self.synthesizer.copy_runner_config_files(module)
        logger.info("Composed test assets of %d module(s) into %s", len(members), module.name)
        return report

    def on_path_config_adjusted(self, module: Optional[Module]) -> Optional[Dict[str, List[str]]]:
        if module is None:
            return None
        self._remember(module)

        if module.is_host:
            members = self.dependency_set(module)
            if not members:
                return None
            # Same helper links as ASSETS_COMPOSED; correct ones stay unchanged.
            self.linker.apply(
                self.host_test_root(module),
                plan_shared_helper_links(
                    self.host_test_root(module), members, plugin_name=self.plugin_name
                ),
            )
            entries = self.synthesizer.alias_entries(module, members)
            spec_config = self.synthesizer.create_host_spec_config(module)
            self.synthesizer.write_aliases(spec_config, entries)
            self.synthesizer.merge_aliases(module.build_config, entries)
            return entries

        settings = read_settings(module, plugin_name=self.plugin_name)
        if settings is None:
            return None
        members = self.dependency_set(module)
        self.linker.compose(
            self.private_test_root(module),
            members,
            test_dirs=False,
            plugin_name=self.plugin_name,
        )
        entries = self.synthesizer.alias_entries(module, members)
        if settings.test_directory_path:
            self.synthesizer.write_module_test_config(module, settings.test_directory_path, entries)
        return entries

    def on_dependencies(self, module: Optional[Module]) -> Optional[Dict[str, str]]:
        if module is None:
            return None
        self._remember(module)
        if not (is_opted_in(module, plugin_name=self.plugin_name) or self.dependency_set(module)):
            return None
        return self.synthesizer.patch_dependency_manifest(module)

    def _test_cwd(self) -> Path:
        if self.host_module is not None:
            return self.host_module.base_path
        return self.composition.repo_root

    def _project_arg(self, command: str, args: Sequence[str]) -> str:
        if not args or not str(args[0]).strip():
            raise E2eLinkError(f"{command} requires a project name", context={"command": command})
        return str(args[0])

    def run_all_tests(self, args: Sequence[str]) -> int:
        return run_tests(self._test_cwd(), self.runner)

    def run_project_tests(self, args: Sequence[str]) -> int:
        return run_tests(self._test_cwd(), self.runner, project=self._project_arg("test-p", args))

    def run_all_ci_tests(self, args: Sequence[str]) -> int:
        return run_tests(self._test_cwd(), self.runner, ci=True)

    def run_project_ci_tests(self, args: Sequence[str]) -> int:
        return run_tests(
            self._test_cwd(), self.runner, project=self._project_arg("test-ci-p", args), ci=True
        )


__all__ = ["CompositionOrchestrator"]
