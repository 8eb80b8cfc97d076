"""Host lifecycle integration."""
from __future__ import annotations

from .events import HostEventBus, HostEvents, InitGuard, LifecycleEvent
from .plugin import CompositionOrchestrator

__all__ = [
    "CompositionOrchestrator",
    "HostEventBus",
    "HostEvents",
    "InitGuard",
    "LifecycleEvent",
]
