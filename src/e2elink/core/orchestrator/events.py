"""Host lifecycle events and the host-side registration interface."""
from __future__ import annotations

import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from e2elink.core.exceptions import E2eLinkError
from e2elink.core.modules import Module

logger = logging.getLogger(__name__)

EventHandler = Callable[[Optional[Module]], Any]
CommandHandler = Callable[[Sequence[str]], Any]


class LifecycleEvent(str, Enum):
    WORKSPACE_CLEANED = "workspace-cleaned"
    ASSETS_COMPOSED = "assets-composed"
    PATH_CONFIG_ADJUSTED = "path-config-adjusted"
    DEPENDENCIES_ABOUT_TO_MERGE = "dependencies-about-to-merge"
    PACKAGES_ABOUT_TO_INSTALL = "packages-about-to-install"


@runtime_checkable
class HostEvents(Protocol):
    """What a host offers an extension during initialization."""

    def register_event_listener(self, event: LifecycleEvent, handler: EventHandler) -> None:
        ...

    def register_command_handler(self, name: str, handler: CommandHandler) -> None:
        ...


class InitGuard:
    """Remembers whether one-time registration already happened.

    Owned by whoever constructs the orchestrator, so separate hosts (or
    tests) can each hold their own guard.
    """

    def __init__(self) -> None:
        self._claimed = False

    @property
    def claimed(self) -> bool:
        return self._claimed

    def claim(self) -> bool:
        """Return True exactly once."""
        if self._claimed:
            return False
        self._claimed = True
        return True


class HostEventBus:
    """In-process ``HostEvents`` implementation.

    Listeners run synchronously in registration order. Registering a command
    name again replaces the previous handler.
    """

    def __init__(self) -> None:
        self._listeners: Dict[LifecycleEvent, List[EventHandler]] = defaultdict(list)
        self._commands: Dict[str, CommandHandler] = {}

    def register_event_listener(self, event: LifecycleEvent | str, handler: EventHandler) -> None:
        self._listeners[LifecycleEvent(event)].append(handler)

    def register_command_handler(self, name: str, handler: CommandHandler) -> None:
        self._commands[name] = handler

    def listeners(self, event: LifecycleEvent | str) -> List[EventHandler]:
        return list(self._listeners.get(LifecycleEvent(event), []))

    @property
    def commands(self) -> List[str]:
        return sorted(self._commands)

    def emit(self, event: LifecycleEvent | str, module: Optional[Module]) -> List[Any]:
        """Call every listener of ``event`` with ``module``; return their results."""
        event = LifecycleEvent(event)
        logger.debug("Emitting %s for %s", event.value, module.name if module else None)
        return [handler(module) for handler in self._listeners.get(event, [])]

    def run_command(self, name: str, args: Sequence[str] = ()) -> Any:
        handler = self._commands.get(name)
        if handler is None:
            raise E2eLinkError(
                f"Unknown command: {name}",
                context={"command": name, "available": self.commands},
            )
        return handler(list(args))


__all__ = [
    "CommandHandler",
    "EventHandler",
    "HostEventBus",
    "HostEvents",
    "InitGuard",
    "LifecycleEvent",
]
