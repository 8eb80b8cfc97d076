"""
e2elink data resource helpers.

Bundled configuration defaults, schemas and templates ship inside this
package and are located with importlib.resources.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a data file or directory.

    Example:
        >>> get_data_path("templates", "tsconfig.spec.json")
        PosixPath('/path/to/e2elink/data/templates/tsconfig.spec.json')
    """
    pkg = resources.files("e2elink.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


__all__ = ["get_data_path"]
