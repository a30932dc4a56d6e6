# SPDX-License-Identifier: MIT
"""Dependency-ordered build execution.

A Builder owns three sets for one invocation: *built*, *failed*, and
*rebuilt* (targets whose commands actually ran). A target is pending
until it lands in built or failed.

Building a target:

1. Vendored targets whose artifact exists count as built, unless the
   target is the one explicitly requested on the command line.
2. Already built or already failed targets return that result.
3. Dependencies are built first, depth-first. A failed dependency
   fails the dependency and this target.
4. If the fingerprint cache says nothing changed (and no dependency was
   rebuilt in this invocation) the target is skipped.
5. Otherwise its cached commands run one by one; the first non-zero
   exit status fails the target and the remaining commands never run.

A target that ends up built or skipped has its manifest recorded as the
one it was built from; a failed target has its manifests dropped.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from bscf.core.cache import BuildCache
from bscf.core.errors import DependencyCycleError

if TYPE_CHECKING:
    from bscf.core.graph import TargetGraph
    from bscf.core.target import Target

logger = logging.getLogger(__name__)

# (command, cwd) -> exit status
Runner = Callable[[str, Path], int]


def run_shell(command: str, cwd: Path) -> int:
    """Run a command through the shell and wait for it.

    Returns:
        The exit status, or 1 if the shell could not be started.
    """
    try:
        result = subprocess.run(command, shell=True, cwd=cwd)
        return result.returncode
    except OSError as e:
        logger.error("Failed to run command: %s", e)
        return 1


class Builder:
    """Execute cached command lists in dependency order.

    Attributes:
        graph: The target graph.
        cache: Cache used for command lists and skip decisions.
        echo: Print each command before running it.
        force: Ignore fingerprints for every target.
        built: Names of targets that are built (or skipped as up to date).
        failed: Names of targets that failed.
        rebuilt: Names of targets whose commands ran successfully.
    """

    def __init__(
        self,
        graph: TargetGraph,
        *,
        cache: BuildCache | None = None,
        runner: Runner | None = None,
        echo: bool = False,
        force: bool = False,
    ) -> None:
        self.graph = graph
        self.cache = cache or BuildCache()
        self.runner = runner or run_shell
        self.echo = echo
        self.force = force
        self.built: set[str] = set()
        self.failed: set[str] = set()
        self.rebuilt: set[str] = set()

    def build(self) -> bool:
        """Build every target in graph order.

        Returns:
            True if no target failed.
        """
        for target in self.graph:
            self._build(target, forced=False, stack=[])
        return not self.failed

    def build_target(self, name: str) -> bool:
        """Build one named target, bypassing its own cache check.

        Dependencies are still memoised and may still be skipped.

        Returns:
            True if the target ended up built.
        """
        target = self.graph.get(name)
        if target is None:
            logger.error("Target %s not found", name)
            return False
        return self._build(target, forced=True, stack=[])

    def state(self, name: str) -> str:
        """Get "built", "failed" or "pending" for a target name."""
        if name in self.failed:
            return "failed"
        if name in self.built:
            return "built"
        return "pending"

    def _build(self, target: Target, *, forced: bool, stack: list[str]) -> bool:
        name = target.name
        if target.vendored and not forced and self.cache.artifact_exists(target):
            logger.debug("%s: vendored artifact present", name)
            self.built.add(name)
            return True
        if name in self.built:
            return True
        if name in self.failed:
            return False
        if name in stack:
            raise DependencyCycleError(stack[stack.index(name) :] + [name], target.defined_at)

        deps = self.graph.dependencies_of(target)
        stack.append(name)
        try:
            for dep in deps:
                if not self._build(dep, forced=False, stack=stack):
                    self.failed.add(dep.name)
                    self.failed.add(name)
                    return False
        finally:
            stack.pop()

        deps_rebuilt = any(dep.name in self.rebuilt for dep in deps)
        if not deps_rebuilt and self.cache.is_up_to_date(
            target, force=self.force or forced
        ):
            print(f"# Skipping {name} (up to date)", flush=True)
            self.cache.record_build(target)
            self.built.add(name)
            return True

        if self._run_commands(target):
            self.cache.record_build(target)
            self.built.add(name)
            self.rebuilt.add(name)
            return True

        self.failed.add(name)
        self.cache.invalidate(target)
        return False

    def _run_commands(self, target: Target) -> bool:
        commands = self.cache.read_commands(target)
        if commands is None:
            logger.error("No cached commands for %s (run buildcache first)", target.name)
            return False

        print(f"# Building {target.name}", flush=True)
        for command in commands:
            if self.echo:
                print(command, flush=True)
            status = self.runner(command, target.path)
            if status != 0:
                logger.error("Failed to build %s (exit %d): %s", target.name, status, command)
                return False
        return True
