"""Dependency graph traversal."""
from __future__ import annotations

import pytest

from e2elink.core.exceptions import DependencyCycleError
from e2elink.core.modules import ModuleGraph, collect_dependencies
from helpers.workspace import make_module


class TestCollectDependencies:
    def test_preorder_first_discovery(self) -> None:
        c = make_module("C")
        a = make_module("A", deps=[c])
        b = make_module("B")

        assert [m.name for m in collect_dependencies([a, b])] == ["A", "C", "B"]

    def test_diamond_is_visited_once(self) -> None:
        """D reachable through both B and C appears once, where first seen."""
        d = make_module("D")
        b = make_module("B", deps=[d])
        c = make_module("C", deps=[d])

        names = [m.name for m in collect_dependencies([b, c])]

        assert names == ["B", "D", "C"]

    def test_duplicate_direct_dependencies_collapse(self) -> None:
        a = make_module("A")
        assert [m.name for m in collect_dependencies([a, a])] == ["A"]

    def test_returns_host_owned_instances(self) -> None:
        a = make_module("A")
        assert collect_dependencies([a])[0] is a

    def test_cycle_raises_with_path(self) -> None:
        a = make_module("A")
        b = make_module("B", deps=[a])
        a.dependencies.append(b)

        with pytest.raises(DependencyCycleError, match="A -> B -> A") as exc:
            collect_dependencies([a])

        assert exc.value.cycle == ["A", "B", "A"]
        assert exc.value.context["cycle"] == ["A", "B", "A"]

    def test_self_dependency_is_a_cycle(self) -> None:
        a = make_module("A")
        a.dependencies.append(a)

        with pytest.raises(DependencyCycleError):
            collect_dependencies([a])

    def test_empty(self) -> None:
        assert collect_dependencies([]) == []


class TestModuleGraph:
    def test_transitive_dependencies_exclude_root(self) -> None:
        c = make_module("C")
        a = make_module("A", deps=[c])
        host = make_module("H", deps=[a], host=True)

        graph = ModuleGraph(host)

        assert [m.name for m in graph.transitive_dependencies()] == ["A", "C"]
        assert [m.name for m in graph.modules()] == ["H", "A", "C"]

    def test_find(self) -> None:
        c = make_module("C")
        host = make_module("H", deps=[make_module("A", deps=[c])], host=True)

        assert ModuleGraph(host).find("C") is c
        assert ModuleGraph(host).find("missing") is None

    def test_dependency_order_puts_dependencies_first(self) -> None:
        d = make_module("D")
        b = make_module("B", deps=[d])
        c = make_module("C", deps=[d])
        host = make_module("H", deps=[b, c], host=True)

        order = ModuleGraph(host).dependency_order()

        assert order[-1] == "H"
        assert order.index("D") < order.index("B")
        assert order.index("D") < order.index("C")
        assert order == ["D", "B", "C", "H"]
