# SPDX-License-Identifier: MIT
"""LLVM/Clang toolchain defaults (clang, clang++, ar)."""

from __future__ import annotations

from bscf.tools.toolchain import Toolchain, ToolchainFamily

PROBE = "clang"


def clang_toolchain() -> Toolchain:
    return Toolchain(
        ToolchainFamily.CLANG, cc="clang", cxx="clang++", link="clang++", ar="ar"
    )
