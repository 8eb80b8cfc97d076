"""Directory-link composition of test assets.

Planning is pure and returns ``LinkEntry`` values; ``AssetLinker`` cleans a
composition root and applies the plan. Every link is attempted on its own:
a failure is logged and recorded in the ``CompositionReport`` and the
remaining links are still applied.
"""
from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

from e2elink.core.fs import FileSystemService, LocalFileSystem
from e2elink.core.modules import (
    DEFAULT_PLUGIN_NAME,
    CompositionReport,
    LinkEntry,
    LinkKind,
    LinkResult,
    LinkStatus,
    Module,
    read_settings,
)

logger = logging.getLogger(__name__)


def split_helper_path(shared_helper_path: str) -> Optional[PurePosixPath]:
    """Directory holding a shared-helper entry file.

    ``helpers/api/index`` yields ``helpers/api``. Returns None when the
    reference has no directory segment or is not a plain relative path.
    """
    path = PurePosixPath(shared_helper_path.replace("\\", "/"))
    parts = [p for p in path.parts if p not in ("", ".")]
    if path.is_absolute() or ".." in parts or len(parts) < 2:
        return None
    return PurePosixPath(*parts[:-1])


def plan_test_dir_links(
    root: Path, members: Iterable[Module], *, plugin_name: str = DEFAULT_PLUGIN_NAME
) -> List[LinkEntry]:
    """``<root>/<module>`` -> ``<base_path>/<testDirectoryPath>`` per member."""
    entries: List[LinkEntry] = []
    for member in members:
        settings = read_settings(member, plugin_name=plugin_name)
        if settings is None or not settings.test_directory_path:
            continue
        entries.append(
            LinkEntry(
                source=Path(member.base_path, settings.test_directory_path),
                destination=Path(root, member.name),
                kind=LinkKind.TEST_DIR,
                module_name=member.name,
            )
        )
    return entries


def plan_shared_helper_links(
    root: Path, members: Iterable[Module], *, plugin_name: str = DEFAULT_PLUGIN_NAME
) -> List[LinkEntry]:
    """``<root>/<package>/<module>/<helperDir>`` -> ``<base_path>/<helperDir>``."""
    entries: List[LinkEntry] = []
    for member in members:
        settings = read_settings(member, plugin_name=plugin_name)
        if settings is None or not settings.shared_helper_path:
            continue
        helper_dir = split_helper_path(settings.shared_helper_path)
        if helper_dir is None:
            logger.warning(
                "Skipping shared helper of %s: %r has no directory to link",
                member.name,
                settings.shared_helper_path,
            )
            continue
        entries.append(
            LinkEntry(
                source=Path(member.base_path, *helper_dir.parts),
                destination=Path(root, member.package_name, member.name, *helper_dir.parts),
                kind=LinkKind.SHARED_HELPER,
                module_name=member.name,
            )
        )
    return entries


class AssetLinker:
    """Cleans composition roots and applies planned links."""

    def __init__(self, fs: Optional[FileSystemService] = None) -> None:
        self.fs = fs or LocalFileSystem()

    def clean(self, root: Path) -> List[Path]:
        removed = self.fs.clear_directory(Path(root))
        if removed:
            logger.debug("Cleaned %d entries from %s", len(removed), root)
        return removed

    def _crosses_link(self, root: Path, destination: Path) -> bool:
        current = Path(root)
        for part in destination.relative_to(root).parts[:-1]:
            current = current / part
            if self.fs.is_symlink(current):
                return True
        return False

    def link(self, root: Path, entry: LinkEntry) -> LinkResult:
        if not self.fs.is_dir(entry.source):
            logger.debug(
                "Skipping %s link for %s: %s is not a directory",
                entry.kind.value,
                entry.module_name,
                entry.source,
            )
            return LinkResult(entry, LinkStatus.SKIPPED)
        if self._crosses_link(Path(root), entry.destination):
            message = f"Link path {entry.destination} passes through another link"
            logger.error("Cannot link %s for %s: %s", entry.kind.value, entry.module_name, message)
            return LinkResult(entry, LinkStatus.FAILED, message)
        try:
            created = self.fs.create_dir_link(entry.destination, entry.source)
        except OSError as e:
            logger.error("Cannot link %s -> %s: %s", entry.destination, entry.source, e)
            return LinkResult(entry, LinkStatus.FAILED, str(e))
        return LinkResult(entry, LinkStatus.LINKED if created else LinkStatus.UNCHANGED)

    def apply(
        self,
        root: Path,
        entries: Iterable[LinkEntry],
        report: Optional[CompositionReport] = None,
    ) -> CompositionReport:
        report = report or CompositionReport(root=Path(root))
        for entry in entries:
            report.add(self.link(root, entry))
        return report

    def compose(
        self,
        root: Path,
        members: List[Module],
        *,
        test_dirs: bool = True,
        shared_helpers: bool = True,
        plugin_name: str = DEFAULT_PLUGIN_NAME,
    ) -> CompositionReport:
        """Clean ``root`` then link the assets of ``members`` into it."""
        root = Path(root)
        report = CompositionReport(root=root, removed=self.clean(root))
        if test_dirs:
            self.apply(root, plan_test_dir_links(root, members, plugin_name=plugin_name), report)
        if shared_helpers:
            self.apply(root, plan_shared_helper_links(root, members, plugin_name=plugin_name), report)
        if report.degraded:
            logger.warning("Composition of %s is incomplete: %d link(s) failed", root, len(report.failed))
        else:
            linked = [r for r in report.results if r.status in (LinkStatus.LINKED, LinkStatus.UNCHANGED)]
            logger.info("Composed %d link(s) into %s", len(linked), root)
        return report


__all__ = [
    "AssetLinker",
    "plan_shared_helper_links",
    "plan_test_dir_links",
    "split_helper_path",
]
