# SPDX-License-Identifier: MIT
"""Include-directory resolution across dependency edges.

A target sees the include directories of everything it depends on,
transitively, followed by its own. The walk is depth-first: a
dependency's own dependencies come before the dependency itself, so
for ``app -> gui -> core`` the order is core's, gui's, then app's.

Directories are de-duplicated, keeping the first occurrence.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from bscf.core.errors import DependencyCycleError

if TYPE_CHECKING:
    from bscf.core.graph import TargetGraph
    from bscf.core.target import Target


class Resolver:
    """Compute the include directories visible to each target.

    Results are memoised per target name; the graph must not change
    while a Resolver is in use.

    Attributes:
        graph: The target graph to resolve against.
    """

    def __init__(self, graph: TargetGraph) -> None:
        self.graph = graph
        self._cache: dict[str, list[Path]] = {}

    def include_dirs(self, target: Target) -> list[Path]:
        """Get the ordered include directories for a target.

        Raises:
            DependencyCycleError: If the dependency edges loop.
        """
        return list(self._resolve(target, []))

    def _resolve(self, target: Target, stack: list[str]) -> list[Path]:
        if target.name in stack:
            cycle = stack[stack.index(target.name) :] + [target.name]
            raise DependencyCycleError(cycle, target.defined_at)
        cached = self._cache.get(target.name)
        if cached is not None and self.graph.get(target.name) is target:
            return cached

        stack.append(target.name)
        result: list[Path] = []
        for dep in self.graph.dependencies_of(target):
            for inc in self._resolve(dep, stack):
                if inc not in result:
                    result.append(inc)
        stack.pop()

        for inc in target.include_dirs:
            if inc not in result:
                result.append(inc)

        if self.graph.get(target.name) is target:
            self._cache[target.name] = result
        return result


def resolve_include_dirs(target: Target, graph: TargetGraph) -> list[Path]:
    """Get the ordered include directories for a target (uncached)."""
    return Resolver(graph).include_dirs(target)
