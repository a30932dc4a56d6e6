# SPDX-License-Identifier: MIT
"""GCC toolchain defaults (gcc, g++, ar)."""

from __future__ import annotations

from bscf.tools.toolchain import Toolchain, ToolchainFamily

# Program probed to decide whether the toolchain is installed.
PROBE = "gcc"


def gcc_toolchain() -> Toolchain:
    return Toolchain(ToolchainFamily.GNU, cc="gcc", cxx="g++", link="g++", ar="ar")
