from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence


class E2eLinkError(Exception):
    """Base exception for e2elink."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class DependencyCycleError(E2eLinkError, ValueError):
    """Raised when the module dependency graph contains a cycle."""

    def __init__(self, cycle: Sequence[str], *, context: Mapping[str, Any] | None = None) -> None:
        ctx = dict(context or {})
        ctx["cycle"] = list(cycle)
        message = f"Dependency cycle detected: {' -> '.join(cycle)}"
        E2eLinkError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)
        self.cycle = list(cycle)


class ConfigCorruptionError(E2eLinkError, ValueError):
    """Raised when an existing config file cannot be parsed."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        E2eLinkError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class TemplateMissingError(E2eLinkError, FileNotFoundError):
    """Raised when a required template file is absent."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        E2eLinkError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class SettingsValidationError(E2eLinkError, ValueError):
    """Raised when a module's test-integration settings violate the schema."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        E2eLinkError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class WorkspaceError(E2eLinkError):
    """Raised when a workspace manifest is invalid or inconsistent."""


class LinkError(E2eLinkError, OSError):
    """Raised by filesystem services when a directory link cannot be created."""

    def __init__(
        self,
        message: str,
        *,
        link: str | None = None,
        target: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if link:
            ctx["link"] = link
        if target:
            ctx["target"] = target
        E2eLinkError.__init__(self, message, context=ctx)
        OSError.__init__(self, message)


__all__ = [
    "E2eLinkError",
    "DependencyCycleError",
    "ConfigCorruptionError",
    "TemplateMissingError",
    "SettingsValidationError",
    "WorkspaceError",
    "LinkError",
]
