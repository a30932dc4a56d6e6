# SPDX-License-Identifier: MIT
"""Target abstraction.

A Target represents something that can be built (an executable, a
static or dynamic library) or an interface that only carries include
directories and libraries for its consumers. Targets are created by a
``TARGET`` directive and mutated in place by later directives that name
them (``DEPEND``, ``DEFINE``, ``LIB``, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from bscf.configure.platform import Platform, get_platform

if TYPE_CHECKING:
    from bscf.util.source_location import SourceLocation

CONFIG_FILENAME = "proj.bscf"


class TargetKind(Enum):
    """Kinds of target, keyed by the name used in ``TARGET <kind>``."""

    EXEC = "EXEC"
    SLIB = "SLIB"
    DLIB = "DLIB"
    INTERFACE = "INTERFACE"

    @property
    def has_artifact(self) -> bool:
        return self is not TargetKind.INTERFACE


@dataclass
class Target:
    """A named build target.

    Dependencies are stored by name and resolved against the target
    graph when they are used, so a dependency may name a target that
    is declared in another file.

    Attributes:
        kind: Type of target.
        name: Target name (unique by convention, see TargetGraph).
        path: Directory of the proj.bscf that declared the target.
        sources: Source files, in declaration order.
        dependencies: Names of targets this target depends on.
        prebuild: Commands run before compiling.
        postbuild: Commands run after linking.
        defines: Preprocessor defines (``NAME`` or ``NAME=VALUE``).
        libs: Libraries to link (``-l<lib>``).
        include_dirs: Include directories, visible to dependents too.
        vendored: Once the artifact exists, never rebuild implicitly.
        defined_at: Where the TARGET directive appeared.
    """

    kind: TargetKind
    name: str
    path: Path
    sources: list[Path] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    prebuild: list[str] = field(default_factory=list)
    postbuild: list[str] = field(default_factory=list)
    defines: list[str] = field(default_factory=list)
    libs: list[str] = field(default_factory=list)
    include_dirs: list[Path] = field(default_factory=list)
    vendored: bool = False
    defined_at: SourceLocation | None = field(default=None, compare=False)

    # Build layout

    @property
    def config_file(self) -> Path:
        return self.path / CONFIG_FILENAME

    @property
    def build_dir(self) -> Path:
        return self.path / "build"

    @property
    def obj_dir(self) -> Path:
        return self.build_dir / "obj"

    @property
    def bin_dir(self) -> Path:
        return self.build_dir / "bin"

    @property
    def lib_dir(self) -> Path:
        return self.build_dir / "lib"

    @property
    def cache_dir(self) -> Path:
        return self.build_dir / "cache"

    @property
    def commands_file(self) -> Path:
        """Persisted command list, one command per line."""
        return self.cache_dir / f"{self.name}.target"

    @property
    def manifest_file(self) -> Path:
        """Fingerprint manifest written by the latest regenerate pass."""
        return self.cache_dir / f"{self.name}.sources"

    @property
    def previous_manifest_file(self) -> Path:
        return self.cache_dir / f"{self.name}.prev.sources"

    def output_dir(self) -> Path | None:
        """Directory holding the final artifact, if the kind has one."""
        if self.kind is TargetKind.SLIB:
            return self.lib_dir
        if self.kind in (TargetKind.EXEC, TargetKind.DLIB):
            return self.bin_dir
        return None

    def artifact_path(self, platform: Platform | None = None) -> Path | None:
        """Get the path of the final artifact.

        Args:
            platform: Naming conventions to use (default: host platform).

        Returns:
            The executable or library path, or None for interface targets.
        """
        platform = platform or get_platform()
        if self.kind is TargetKind.EXEC:
            return self.bin_dir / platform.executable_name(self.name)
        if self.kind is TargetKind.SLIB:
            return self.lib_dir / platform.static_library_name(self.name)
        if self.kind is TargetKind.DLIB:
            return self.bin_dir / platform.shared_library_name(self.name)
        return None

    def __repr__(self) -> str:
        deps = ", ".join(self.dependencies)
        return f"Target({self.kind.value} {self.name!r}, deps=[{deps}])"
