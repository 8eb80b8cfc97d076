"""Generated configuration for composed test assets.

``ConfigSynthesizer`` writes the path-alias tables, the per-module runner
manifests with their projects index, and patches dependency manifests. Every
artifact is regenerated from scratch, and JSON output is deterministic
(sorted keys, two-space indent, trailing newline), so a rerun without
upstream changes reproduces identical files.
"""
from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterable, List, Mapping, Optional

from e2elink.core.config.domains import CompositionConfig, RunnerConfig
from e2elink.core.exceptions import ConfigCorruptionError
from e2elink.core.fs import FileSystemService, LocalFileSystem
from e2elink.core.modules import Module, declared_extra_packages, read_settings

from .aliases import apply_path_aliases, build_alias_entries
from .templates import TemplateStore

logger = logging.getLogger(__name__)


class ConfigSynthesizer:
    """Writes e2elink's generated configuration artifacts."""

    def __init__(
        self,
        composition: CompositionConfig,
        runner: RunnerConfig,
        fs: Optional[FileSystemService] = None,
    ) -> None:
        self.composition = composition
        self.runner = runner
        self.fs = fs or LocalFileSystem()
        self.templates = TemplateStore(composition.templates_dir, self.fs)

    # ---------------------------------------------------------------------
    # Path aliases
    # ---------------------------------------------------------------------

    def alias_entries(self, target: Module, members: Iterable[Module]) -> Dict[str, List[str]]:
        return build_alias_entries(target, members, self.composition)

    def merge_aliases(self, document: Dict[str, Any], entries: Dict[str, List[str]]) -> Dict[str, Any]:
        apply_path_aliases(document, entries, self.composition.generated_marker)
        return document

    def write_aliases(self, path: Path, entries: Dict[str, List[str]]) -> Dict[str, Any]:
        """Merge ``entries`` into the JSON document at ``path`` with one write.

        A missing file starts from an empty document.

        Raises:
            ConfigCorruptionError: If the existing file does not parse. The
                file is left untouched.
        """
        path = Path(path)
        document: Dict[str, Any] = {}
        if self.fs.exists(path):
            loaded = self.fs.read_json(path)
            if not isinstance(loaded, dict):
                raise ConfigCorruptionError(
                    f"Expected a JSON object in {path}", context={"path": str(path)}
                )
            document = loaded
        self.merge_aliases(document, entries)
        self.fs.write_json(path, document)
        logger.debug("Wrote %d generated alias(es) to %s", len(entries), path)
        return document

    # ---------------------------------------------------------------------
    # Spec path-config files
    # ---------------------------------------------------------------------

    def host_spec_config_path(self, host: Module) -> Path:
        return self.fs.join(host.base_path, self.composition.spec_config_name)

    def create_host_spec_config(self, host: Module) -> Path:
        """Recreate the host's spec path-config file from its template."""
        return self.templates.copy_to(self.composition.spec_config_name, self.host_spec_config_path(host))

    def module_test_config_path(self, module: Module, test_directory_path: str) -> Path:
        return self.fs.join(module.base_path, test_directory_path, self.composition.module_spec_config_name)

    def write_module_test_config(
        self, module: Module, test_directory_path: str, entries: Dict[str, List[str]]
    ) -> Path:
        """Recreate a module's test path-config with its aliases in one write."""
        document = self.templates.load_json(self.composition.spec_config_name)
        base_url = PurePosixPath(test_directory_path.replace("\\", "/"))
        document.setdefault("compilerOptions", {})["baseUrl"] = f"./{base_url}/"
        self.merge_aliases(document, entries)
        path = self.module_test_config_path(module, test_directory_path)
        self.fs.write_json(path, document)
        return path

    # ---------------------------------------------------------------------
    # Runner manifests
    # ---------------------------------------------------------------------

    def manifest_dir(self, host: Module) -> Path:
        return self.fs.join(host.base_path, self.runner.manifest_dir)

    def clean_manifests(self, host: Module) -> List[Path]:
        return self.fs.clear_directory(self.manifest_dir(host))

    def runner_manifest(self, module_name: str) -> Dict[str, Any]:
        """Runner manifest for one module, scoped to its composed test dir."""
        manifest = self.templates.load_json(self.runner.manifest_template)
        test_dir = PurePosixPath(self.composition.host_test_root, module_name)
        manifest["files"] = [f"{test_dir}/**/*"]
        if "snapshotDir" in manifest:
            manifest["snapshotDir"] = f"{test_dir}/snapshots"
        return manifest

    def write_runner_manifests(self, host: Module, members: Iterable[Module]) -> List[Path]:
        """Regenerate the manifest directory for members with a test dir.

        Writes ``<module>.<ext>`` per member plus the projects index.
        """
        self.clean_manifests(host)
        directory = self.manifest_dir(host)
        projects: List[Dict[str, str]] = []
        written: List[Path] = []
        for member in members:
            settings = read_settings(member, plugin_name=self.composition.plugin_name)
            if settings is None or not settings.test_directory_path:
                continue
            name = self.runner.manifest_name(member.name)
            path = self.fs.join(directory, name)
            self.fs.write_json(path, self.runner_manifest(member.name))
            written.append(path)
            projects.append(
                {
                    "name": member.name,
                    "testDir": str(PurePosixPath(self.composition.host_test_root, member.name)),
                    "manifest": name,
                }
            )

        index = self.fs.join(directory, self.runner.projects_index)
        self.fs.write_json(index, {"projects": projects})
        logger.info("Wrote %d runner manifest(s) to %s", len(written), directory)
        return [*written, index]

    def copy_runner_config_files(self, host: Module) -> List[Path]:
        """Copy the runner's static config files into the host base path."""
        return [
            self.templates.copy_to(name, self.fs.join(host.base_path, name))
            for name in self.runner.config_files
        ]

    # ---------------------------------------------------------------------
    # Dependency manifest
    # ---------------------------------------------------------------------

    def patch_dependency_manifest(
        self, target: Module, extra_packages: Optional[Mapping[str, str]] = None
    ) -> Dict[str, str]:
        """Merge base packages, then the target's own extras, into its manifest.

        Extras are applied last, so they win over base packages of the same
        name. Returns the resulting dependency section.
        """
        if extra_packages is None:
            extra_packages = declared_extra_packages(target, plugin_name=self.composition.plugin_name)
        section_name = self.composition.dependency_section
        section = target.package_manifest.get(section_name)
        if not isinstance(section, dict):
            section = {}
            target.package_manifest[section_name] = section
        section.update(self.composition.base_packages)
        section.update(extra_packages)
        logger.debug("Patched %s of %s with %d package(s)", section_name, target.name, len(section))
        return section


__all__ = ["ConfigSynthesizer"]
