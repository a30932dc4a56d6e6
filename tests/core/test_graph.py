# SPDX-License-Identifier: MIT
"""Tests for bscf.core.graph."""

from __future__ import annotations

from pathlib import Path

import pytest

from bscf.core.errors import DependencyCycleError, DuplicateTargetError
from bscf.core.graph import TargetGraph
from bscf.core.target import Target, TargetKind


def make_target(name: str, *deps: str, kind: TargetKind = TargetKind.SLIB) -> Target:
    return Target(kind=kind, name=name, path=Path("/p") / name, dependencies=list(deps))


class TestTargetGraph:
    def test_preserves_insertion_order(self):
        graph = TargetGraph()
        for name in ("c", "a", "b"):
            graph.add(make_target(name))

        assert graph.names == ["c", "a", "b"]
        assert [t.name for t in graph] == ["c", "a", "b"]
        assert len(graph) == 3

    def test_get_and_contains(self):
        graph = TargetGraph()
        core = graph.add(make_target("core"))

        assert graph.get("core") is core
        assert "core" in graph
        assert graph.get("missing") is None
        assert "missing" not in graph

    def test_duplicate_first_match(self):
        """Test that the first declaration wins lookups but both are kept."""
        graph = TargetGraph()
        first = graph.add(make_target("app"))
        second = graph.add(make_target("app"))

        assert graph.get("app") is first
        assert list(graph) == [first, second]
        assert graph.duplicates == [second]

    def test_duplicate_strict(self):
        graph = TargetGraph(strict=True)
        graph.add(make_target("app"))

        with pytest.raises(DuplicateTargetError, match="app"):
            graph.add(make_target("app"))

    def test_since(self):
        graph = TargetGraph()
        graph.add(make_target("a"))
        b = graph.add(make_target("b"))
        c = graph.add(make_target("c"))

        assert graph.since(1) == [b, c]
        assert graph.since(3) == []


class TestDependencies:
    def test_unknown_dependencies_dropped(self):
        graph = TargetGraph()
        core = graph.add(make_target("core"))
        app = graph.add(make_target("app", "core", "ghost", kind=TargetKind.EXEC))

        assert graph.dependencies_of(app) == [core]

    def test_no_cycles(self):
        graph = TargetGraph()
        graph.add(make_target("core"))
        graph.add(make_target("gui", "core"))
        graph.add(make_target("app", "gui", "core"))

        graph.check_cycles()

    def test_direct_cycle(self):
        """Test that a two-target cycle is reported with its path."""
        graph = TargetGraph()
        graph.add(make_target("a", "b"))
        graph.add(make_target("b", "a"))

        with pytest.raises(DependencyCycleError) as exc_info:
            graph.check_cycles()

        assert exc_info.value.cycle == ["a", "b", "a"]
        assert "a -> b -> a" in str(exc_info.value)

    def test_self_dependency(self):
        graph = TargetGraph()
        graph.add(make_target("a", "a"))

        with pytest.raises(DependencyCycleError):
            graph.check_cycles()
