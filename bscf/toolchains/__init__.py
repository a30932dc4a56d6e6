# SPDX-License-Identifier: MIT
"""Toolchain definitions (GCC, LLVM, MSVC) and discovery."""

from __future__ import annotations

import logging
from collections.abc import Callable

from bscf.configure.config import Configure
from bscf.toolchains import gcc, llvm, msvc
from bscf.toolchains.gcc import gcc_toolchain
from bscf.toolchains.llvm import clang_toolchain
from bscf.toolchains.msvc import msvc_toolchain
from bscf.tools.toolchain import Toolchain, ToolchainFamily

logger = logging.getLogger(__name__)

# Order of preference when auto-detecting.
_FACTORIES: dict[ToolchainFamily, tuple[str, Callable[[], Toolchain]]] = {
    ToolchainFamily.GNU: (gcc.PROBE, gcc_toolchain),
    ToolchainFamily.CLANG: (llvm.PROBE, clang_toolchain),
    ToolchainFamily.MSVC: (msvc.PROBE, msvc_toolchain),
}


def toolchain_for(name: str) -> Toolchain:
    """Get the default descriptor for a family name ('gnu', 'clang', 'msvc').

    Raises:
        ValueError: If the name is not a known family.
    """
    family = ToolchainFamily(name.lower())
    return _FACTORIES[family][1]()


def apply_overrides(toolchain: Toolchain) -> Toolchain:
    """Apply BSCF_CC / BSCF_CXX / BSCF_LINK / BSCF_AR overrides."""
    from bscf import get_var

    return toolchain.with_overrides(
        cc=get_var("BSCF_CC"),
        cxx=get_var("BSCF_CXX"),
        link=get_var("BSCF_LINK"),
        ar=get_var("BSCF_AR"),
    )


def find_c_toolchain(config: Configure | None = None) -> Toolchain:
    """Select the toolchain for this invocation.

    ``BSCF_TOOLCHAIN`` picks a family explicitly. Otherwise the first
    installed family wins (GNU, then Clang, then MSVC). When nothing is
    installed the GNU defaults are returned with a warning, so commands
    that never compile (clean, buildcache) still work.
    """
    from bscf import get_var

    requested = get_var("BSCF_TOOLCHAIN")
    if requested:
        try:
            return apply_overrides(toolchain_for(requested))
        except ValueError:
            logger.warning("Unknown BSCF_TOOLCHAIN value: %s", requested)

    config = config or Configure()
    for probe, factory in _FACTORIES.values():
        if config.has_program(probe):
            toolchain = factory()
            logger.debug("Using %s toolchain", toolchain.name)
            return apply_overrides(toolchain)

    logger.warning("No C/C++ compiler found; defaulting to the gnu toolchain")
    return apply_overrides(gcc_toolchain())


__all__ = [
    "Toolchain",
    "ToolchainFamily",
    "apply_overrides",
    "clang_toolchain",
    "find_c_toolchain",
    "gcc_toolchain",
    "msvc_toolchain",
    "toolchain_for",
]
