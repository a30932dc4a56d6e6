# SPDX-License-Identifier: MIT
"""Toolchain descriptor.

A Toolchain names the four executables bscf hands commands to: the C
compiler, the C++ compiler, the linker and the archiver. It is selected
once per command (``gnu``, ``clang``, ``msvc`` on the command line) and
never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

# Maps source suffix to the compiler slot that builds it.
SOURCE_SUFFIX_MAP: dict[str, str] = {
    ".c": "cc",
    ".cpp": "cxx",
    ".cxx": "cxx",
    ".cc": "cxx",
    ".c++": "cxx",
}

HEADER_SUFFIXES: frozenset[str] = frozenset({".h", ".hpp", ".hh", ".hxx"})


def is_source(path: Path | str) -> bool:
    """Check whether a file is a compilable C or C++ source."""
    return Path(path).suffix.lower() in SOURCE_SUFFIX_MAP


def is_header(path: Path | str) -> bool:
    return Path(path).suffix.lower() in HEADER_SUFFIXES


class ToolchainFamily(Enum):
    """Toolchain families, in order of preference."""

    GNU = "gnu"
    CLANG = "clang"
    MSVC = "msvc"


@dataclass(frozen=True)
class Toolchain:
    """The executables used to build a target.

    Attributes:
        family: Which toolchain family this is.
        cc: C compiler.
        cxx: C++ compiler.
        link: Linker (used for executables and shared libraries).
        ar: Archiver (used for static libraries).
        ar_flags: Flags passed to the archiver before the output path.
        object_suffix: Suffix for object files.
        pic_flag: Flag for position-independent code.
        shared_flag: Flag asking the linker for a shared library.
    """

    family: ToolchainFamily
    cc: str
    cxx: str
    link: str
    ar: str
    ar_flags: str = "rcs"
    object_suffix: str = ".o"
    pic_flag: str = "-fPIC"
    shared_flag: str = "-shared"

    @property
    def name(self) -> str:
        """Toolchain name as used by ``IF COMPILER`` (e.g. 'gnu')."""
        return self.family.value

    def compiler_for(self, source: Path | str) -> str | None:
        """Get the compiler executable for a source file.

        Returns:
            The C or C++ compiler, or None if the suffix is not a
            recognized source suffix.
        """
        slot = SOURCE_SUFFIX_MAP.get(Path(source).suffix.lower())
        if slot is None:
            return None
        return self.cxx if slot == "cxx" else self.cc

    def with_overrides(
        self,
        *,
        cc: str | None = None,
        cxx: str | None = None,
        link: str | None = None,
        ar: str | None = None,
    ) -> Toolchain:
        """Return a copy with some executables replaced."""
        return replace(
            self,
            cc=cc or self.cc,
            cxx=cxx or self.cxx,
            link=link or self.link,
            ar=ar or self.ar,
        )

    def __str__(self) -> str:
        return f"{self.name} (cc={self.cc}, cxx={self.cxx}, link={self.link}, ar={self.ar})"
