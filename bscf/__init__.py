# SPDX-License-Identifier: MIT
"""
bscf: a build-configuration interpreter and incremental builder.

bscf reads a declarative proj.bscf describing C/C++ targets, expands it
(recursively, across vendored sub-projects) into a target graph,
generates the compiler and linker commands for each target, and runs
only the targets whose inputs changed since the last build.
"""

from __future__ import annotations

import os

__version__ = "0.2.0"


def get_var(name: str, default: str | None = None) -> str | None:
    """Get a build variable from the environment.

    Used for settings that have no command-line spelling, e.g.:

        BSCF_TOOLCHAIN=clang bscf
        BSCF_CC=gcc-13 BSCF_CXX=g++-13 bscf . build

    Args:
        name: Variable name.
        default: Default value if not set.

    Returns:
        The variable value, or default if unset or empty.
    """
    return os.environ.get(name) or default


# Re-export commonly used classes for convenient imports
from bscf.core.expander import Expander, ParseResult, expand  # noqa: E402
from bscf.core.graph import TargetGraph  # noqa: E402
from bscf.core.project import Project  # noqa: E402
from bscf.core.target import Target, TargetKind  # noqa: E402
from bscf.toolchains import find_c_toolchain  # noqa: E402

__all__ = [
    "__version__",
    "get_var",
    "Expander",
    "ParseResult",
    "Project",
    "Target",
    "TargetGraph",
    "TargetKind",
    "expand",
    "find_c_toolchain",
]
