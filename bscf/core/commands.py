# SPDX-License-Identifier: MIT
"""Command generation.

The CommandGenerator turns one Target into the ordered list of shell
commands that produce its artifact:

1. the target's PREBUILD commands, verbatim
2. one copy command per dynamic-library dependency, so the library sits
   next to the consumer's output
3. one compile command per recognized source file
4. one link (EXEC, DLIB) or archive (SLIB) command
5. the target's POSTBUILD commands, verbatim

INTERFACE targets produce no compile or link commands; only their
prebuild/postbuild commands (and dependency copies) are emitted.

Example, for ``TARGET EXEC app ALL`` with ``src/main.c``::

    gcc -c /p/src/main.c -o /p/build/obj/src_main.c.o -I/p/src
    g++ /p/build/obj/src_main.c.o -o /p/build/bin/app
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from bscf.configure.platform import Platform, get_platform
from bscf.core.resolver import Resolver
from bscf.core.target import TargetKind
from bscf.tools.toolchain import is_header

if TYPE_CHECKING:
    from bscf.core.graph import TargetGraph
    from bscf.core.target import Target
    from bscf.tools.toolchain import Toolchain

logger = logging.getLogger(__name__)


def object_name(target: Target, source: Path, suffix: str = ".o") -> str:
    """Derive the object file name for a source.

    The source path relative to the target's directory, with path
    separators replaced by ``_``: ``src/gfx/draw.c`` -> ``src_gfx_draw.c.o``.
    """
    rel = os.path.relpath(source, target.path)
    return rel.replace("/", "_").replace("\\", "_") + suffix


def copy_command(src: Path, dest: Path, platform: Platform | None = None) -> str:
    """Build a portable file-copy command (see bscf.util.commands)."""
    q = _quoter(platform or get_platform())
    return f"{q(sys.executable)} -m bscf.util.commands copy {q(src)} {q(dest)}"


def _quoter(platform: Platform) -> Callable[[object], str]:
    if platform.is_windows:
        return lambda arg: subprocess.list2cmdline([str(arg)])
    return lambda arg: shlex.quote(str(arg))


def _join(*parts: str) -> str:
    return " ".join(p for p in parts if p)


class CommandGenerator:
    """Generate the command list for targets of one graph.

    Attributes:
        toolchain: Executables to invoke.
        graph: Graph used to resolve dependency names.
        platform: Artifact naming conventions.
    """

    def __init__(
        self,
        toolchain: Toolchain,
        graph: TargetGraph,
        *,
        platform: Platform | None = None,
        resolver: Resolver | None = None,
    ) -> None:
        self.toolchain = toolchain
        self.graph = graph
        self.platform = platform or get_platform()
        self.resolver = resolver or Resolver(graph)
        self._q = _quoter(self.platform)

    def generate(self, target: Target, *, create_dirs: bool = True) -> list[str]:
        """Generate the ordered command list for a target.

        Args:
            target: The target to generate commands for.
            create_dirs: Create the target's output directories.

        Returns:
            Shell commands, in execution order.

        Raises:
            DependencyCycleError: If the target's dependencies loop.
        """
        commands: list[str] = list(target.prebuild)

        link_flags = [f"-l{lib}" for lib in target.libs]
        for dep in self.graph.dependencies_of(target):
            link_flags.extend(self.dependency_link_flags(dep))
            if dep.kind is TargetKind.DLIB:
                commands.append(self._dependency_copy(dep, target))

        compile_flags = self.compile_flags(target)

        if target.kind.has_artifact:
            objects: list[Path] = []
            for source in target.sources:
                command = self.compile_command(target, source, compile_flags)
                if command is not None:
                    commands.append(command)
                    objects.append(self.object_path(target, source))
            commands.append(self.link_command(target, objects, link_flags))

        commands.extend(target.postbuild)

        if create_dirs:
            self.create_output_dirs(target)
        return commands

    def compile_flags(self, target: Target) -> list[str]:
        """``-D`` for each define, then ``-I`` for each visible include dir."""
        flags = [f"-D{define}" for define in target.defines]
        flags.extend(f"-I{self._q(inc)}" for inc in self.resolver.include_dirs(target))
        return flags

    def dependency_link_flags(self, dep: Target) -> list[str]:
        """Link flags contributed by depending on ``dep``.

        Static and dynamic libraries contribute a search path, the
        library itself and the libraries it links. Interface targets
        contribute only their libraries. Executables contribute nothing.
        """
        dep_libs = [f"-l{lib}" for lib in dep.libs]
        if dep.kind is TargetKind.SLIB:
            return [f"-L{self._q(dep.lib_dir)}", f"-l{dep.name}", *dep_libs]
        if dep.kind is TargetKind.DLIB:
            return [f"-L{self._q(dep.bin_dir)}", f"-l{dep.name}", *dep_libs]
        if dep.kind is TargetKind.INTERFACE:
            return dep_libs
        return []

    def object_path(self, target: Target, source: Path) -> Path:
        return target.obj_dir / object_name(target, source, self.toolchain.object_suffix)

    def compile_command(
        self, target: Target, source: Path, compile_flags: list[str]
    ) -> str | None:
        """Build the compile command for one source.

        Returns:
            The command, or None if the file is not a compilable source.
        """
        compiler = self.toolchain.compiler_for(source)
        if compiler is None:
            if is_header(source):
                logger.debug("Skipping header %s", source)
            else:
                logger.warning("Skipping %s (not a C/C++ source)", source)
            return None

        q = self._q
        command = _join(
            compiler,
            "-c",
            q(source),
            "-o",
            q(self.object_path(target, source)),
            *compile_flags,
        )
        if target.kind is TargetKind.DLIB:
            command = _join(command, self.toolchain.pic_flag)
        return command

    def link_command(self, target: Target, objects: list[Path], link_flags: list[str]) -> str:
        """Build the final link or archive command."""
        q = self._q
        output = target.artifact_path(self.platform)
        objs = [q(obj) for obj in objects]
        if target.kind is TargetKind.SLIB:
            return _join(self.toolchain.ar, self.toolchain.ar_flags, q(output), *objs)
        if target.kind is TargetKind.DLIB:
            return _join(
                self.toolchain.link,
                self.toolchain.shared_flag,
                *objs,
                "-o",
                q(output),
                *link_flags,
            )
        return _join(self.toolchain.link, *objs, "-o", q(output), *link_flags)

    def _dependency_copy(self, dep: Target, target: Target) -> str:
        artifact = dep.artifact_path(self.platform)
        assert artifact is not None
        return copy_command(artifact, target.bin_dir / artifact.name, self.platform)

    def create_output_dirs(self, target: Target) -> None:
        target.cache_dir.mkdir(parents=True, exist_ok=True)
        output_dir = target.output_dir()
        if output_dir is not None:
            target.obj_dir.mkdir(parents=True, exist_ok=True)
            output_dir.mkdir(parents=True, exist_ok=True)
