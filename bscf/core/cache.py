# SPDX-License-Identifier: MIT
"""Per-target build cache.

Every regenerate pass writes, for each target, into ``build/cache/``:

- ``<name>.target``: the command list, one command per line
- ``<name>.sources``: the current fingerprint manifest

The executor copies ``<name>.sources`` to ``<name>.prev.sources`` once
the target is built or found up to date, so the previous manifest is
always the one the last successful build saw. Regenerating without
building leaves it alone.

The manifest covers the target's sources, its proj.bscf, and its
command list file (so a toolchain or flag change is also a change).
The executor may skip a target only when the current and previous
manifests are identical.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from bscf.configure.platform import Platform, get_platform
from bscf.core import fingerprint
from bscf.core.commands import CommandGenerator

if TYPE_CHECKING:
    from bscf.core.graph import TargetGraph
    from bscf.core.target import Target
    from bscf.tools.toolchain import Toolchain

logger = logging.getLogger(__name__)


class BuildCache:
    """Read and write the cache files of targets.

    Attributes:
        platform: Naming conventions used to locate artifacts.
    """

    def __init__(self, platform: Platform | None = None) -> None:
        self.platform = platform or get_platform()

    def write_commands(self, target: Target, commands: list[str]) -> Path:
        path = target.commands_file
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            for command in commands:
                f.write(command + "\n")
        return path

    def read_commands(self, target: Target) -> list[str] | None:
        """Read a target's persisted command list.

        Returns:
            Non-empty command lines, or None if nothing was generated.
        """
        try:
            with open(target.commands_file, encoding="utf-8") as f:
                return [line.strip() for line in f if line.strip()]
        except FileNotFoundError:
            return None

    def inputs(self, target: Target) -> list[Path]:
        """Files whose content decides whether a target is up to date."""
        return [*target.sources, target.config_file, target.commands_file]

    def write_manifest(self, target: Target) -> list[str]:
        return fingerprint.write_manifest(target.manifest_file, self.inputs(target))

    def record_build(self, target: Target) -> None:
        """Remember the current manifest as the one the target was built from."""
        fingerprint.copy_manifest(target.manifest_file, target.previous_manifest_file)

    def is_up_to_date(self, target: Target, *, force: bool = False) -> bool:
        """Decide whether a target's cached commands may be skipped.

        A target is up to date when force is off, both manifests exist
        and match line by line, and the artifact (if the kind has one)
        exists.
        """
        if force:
            return False
        if not fingerprint.manifests_match(
            target.manifest_file, target.previous_manifest_file
        ):
            return False
        artifact = target.artifact_path(self.platform)
        if artifact is not None and not artifact.exists():
            logger.debug("%s: artifact %s missing", target.name, artifact)
            return False
        return True

    def invalidate(self, target: Target) -> None:
        """Forget a target's manifests so its next build cannot be skipped."""
        target.manifest_file.unlink(missing_ok=True)
        target.previous_manifest_file.unlink(missing_ok=True)

    def artifact_exists(self, target: Target) -> bool:
        artifact = target.artifact_path(self.platform)
        return artifact is not None and artifact.exists()


def generate_cache(
    graph: TargetGraph,
    toolchain: Toolchain,
    *,
    platform: Platform | None = None,
) -> BuildCache:
    """Regenerate command lists and manifests for every target.

    Raises:
        DependencyCycleError: If the graph's dependencies loop.
    """
    cache = BuildCache(platform)
    generator = CommandGenerator(toolchain, graph, platform=cache.platform)
    for target in graph:
        commands = generator.generate(target)
        cache.write_commands(target, commands)
        cache.write_manifest(target)
        logger.debug("%s: %d command(s)", target.name, len(commands))
    return cache
