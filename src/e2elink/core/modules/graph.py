"""Traversal of the host's module dependency graph.

Traversal is depth-first and pre-order: a module is recorded the first time
it is reached, before its own dependencies. Modules are identified by name,
so a module reachable through several paths (a diamond) is visited once.
Reaching a module that is still on the current path is a cycle and raises
``DependencyCycleError``.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set

from e2elink.core.exceptions import DependencyCycleError

from .models import Module


def collect_dependencies(dependencies: Iterable[Module]) -> List[Module]:
    """Return the deduplicated transitive closure of ``dependencies``.

    Order is first-discovery (pre-)order, deterministic for a deterministic
    dependency order on each module.

    Raises:
        DependencyCycleError: If a module depends on one of its ancestors.
    """
    ordered: List[Module] = []
    seen: Set[str] = set()
    path: List[str] = []

    def visit(module: Module) -> None:
        if module.name in path:
            start = path.index(module.name)
            raise DependencyCycleError([*path[start:], module.name])
        if module.name in seen:
            return
        seen.add(module.name)
        ordered.append(module)
        path.append(module.name)
        for dep in module.dependencies:
            visit(dep)
        path.pop()

    for dep in dependencies:
        visit(dep)
    return ordered


class ModuleGraph:
    """Read-only view over a root module and everything it depends on."""

    def __init__(self, root: Module) -> None:
        self.root = root

    def transitive_dependencies(self) -> List[Module]:
        """All modules the root depends on, excluding the root itself."""
        return collect_dependencies(self.root.dependencies)

    def modules(self) -> List[Module]:
        """The root followed by its transitive dependencies."""
        return collect_dependencies([self.root])

    def find(self, name: str) -> Optional[Module]:
        for module in self.modules():
            if module.name == name:
                return module
        return None

    def dependency_order(self) -> List[str]:
        """Module names ordered so dependencies come before dependents.

        Uses Kahn's algorithm; ties are broken by first-discovery order so the
        result is deterministic.
        """
        modules = self.modules()
        preferred = {m.name: i for i, m in enumerate(modules)}
        by_name: Dict[str, Module] = {m.name: m for m in modules}

        indeg: Dict[str, int] = {name: 0 for name in by_name}
        dependents: Dict[str, List[str]] = {name: [] for name in by_name}
        for name, module in by_name.items():
            for dep_name in dict.fromkeys(d.name for d in module.dependencies):
                indeg[name] += 1
                dependents[dep_name].append(name)

        ready = [n for n, d in indeg.items() if d == 0]
        order: List[str] = []
        while ready:
            ready.sort(key=lambda n: preferred[n])
            n = ready.pop(0)
            order.append(n)
            for m in dependents[n]:
                indeg[m] -= 1
                if indeg[m] == 0:
                    ready.append(m)
        return order


__all__ = ["collect_dependencies", "ModuleGraph"]
