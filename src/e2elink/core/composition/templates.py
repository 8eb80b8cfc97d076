"""Template lookup for generated configuration files."""
from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict

from e2elink.core.exceptions import ConfigCorruptionError, TemplateMissingError
from e2elink.core.fs import FileSystemService

logger = logging.getLogger(__name__)


class TemplateStore:
    """Resolves, copies and parses templates from one directory."""

    def __init__(self, templates_dir: Path, fs: FileSystemService) -> None:
        self.templates_dir = Path(templates_dir)
        self.fs = fs

    def path(self, name: str) -> Path:
        """Return the template path.

        Raises:
            TemplateMissingError: If the template does not exist.
        """
        path = self.fs.join(self.templates_dir, name)
        if not self.fs.is_file(path):
            raise TemplateMissingError(
                f"Template not found: {path}",
                context={"template": name, "templatesDir": str(self.templates_dir)},
            )
        return path

    def load_json(self, name: str) -> Dict[str, Any]:
        """Parse a JSON template into a fresh dict."""
        path = self.path(name)
        data = self.fs.read_json(path)
        if not isinstance(data, dict):
            raise ConfigCorruptionError(
                f"Template {path} must contain a JSON object",
                context={"path": str(path)},
            )
        return copy.deepcopy(data)

    def copy_to(self, name: str, destination: Path) -> Path:
        """Replace ``destination`` with a verbatim copy of the template."""
        source = self.path(name)
        self.fs.copy_file(source, destination)
        logger.debug("Copied template %s -> %s", source, destination)
        return Path(destination)


__all__ = ["TemplateStore"]
