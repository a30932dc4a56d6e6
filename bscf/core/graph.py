# SPDX-License-Identifier: MIT
"""The target graph.

TargetGraph is the single registry that every recursive expansion
appends to. It keeps declaration order (build order for ``build``) and
an index from name to the *first* target declared with that name, so
lookups are O(1) while keeping first-match semantics for duplicates.

Edges are not stored separately: a dependency is a name on the
depending target, resolved through ``get()`` when it is used. A name
that is not (yet) declared resolves to nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from bscf.core.errors import DependencyCycleError, DuplicateTargetError

if TYPE_CHECKING:
    from bscf.core.target import Target

logger = logging.getLogger(__name__)


class TargetGraph:
    """Insertion-ordered collection of targets with name lookup.

    Attributes:
        strict: Reject duplicate target names instead of shadowing them.
        duplicates: Targets whose name was already taken when added.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict
        self._targets: list[Target] = []
        self._index: dict[str, int] = {}
        self.duplicates: list[Target] = []

    def add(self, target: Target) -> Target:
        """Append a target.

        A target whose name is already taken is still appended (it is
        built like any other) but lookups keep returning the first one.

        Raises:
            DuplicateTargetError: In strict mode, if the name is taken.
        """
        if target.name in self._index:
            if self.strict:
                raise DuplicateTargetError(target.name, target.defined_at)
            logger.debug("Target %s declared twice; first wins", target.name)
            self.duplicates.append(target)
        else:
            self._index[target.name] = len(self._targets)
        self._targets.append(target)
        return target

    def get(self, name: str) -> Target | None:
        """Get the first target declared with this name."""
        index = self._index.get(name)
        if index is None:
            return None
        return self._targets[index]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[Target]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __getitem__(self, index: int) -> Target:
        return self._targets[index]

    @property
    def names(self) -> list[str]:
        return [t.name for t in self._targets]

    def since(self, start: int) -> list[Target]:
        """Targets added at or after position ``start``."""
        return self._targets[start:]

    def dependencies_of(self, target: Target) -> list[Target]:
        """Resolve a target's dependency names, dropping unknown ones."""
        deps = []
        for name in target.dependencies:
            dep = self.get(name)
            if dep is not None:
                deps.append(dep)
        return deps

    def check_cycles(self) -> None:
        """Raise DependencyCycleError if any dependency chain loops.

        Raises:
            DependencyCycleError: With the names forming the cycle.
        """
        done: set[str] = set()

        def visit(target: Target, stack: list[str]) -> None:
            if target.name in stack:
                raise DependencyCycleError(stack[stack.index(target.name) :] + [target.name])
            if target.name in done:
                return
            stack.append(target.name)
            for dep in self.dependencies_of(target):
                visit(dep, stack)
            stack.pop()
            done.add(target.name)

        for target in self._targets:
            visit(target, [])

    def __repr__(self) -> str:
        return f"TargetGraph({self.names})"
