# SPDX-License-Identifier: MIT
"""MSVC toolchain defaults (cl, link, lib).

Only the executable names differ from the GCC-style toolchains; the
command layout is shared.
"""

from __future__ import annotations

from bscf.tools.toolchain import Toolchain, ToolchainFamily

PROBE = "cl"


def msvc_toolchain() -> Toolchain:
    return Toolchain(
        ToolchainFamily.MSVC,
        cc="cl",
        cxx="cl",
        link="link",
        ar="lib",
        object_suffix=".obj",
    )
