# SPDX-License-Identifier: MIT
"""Source locations inside proj.bscf files.

Diagnostics and errors carry a SourceLocation so that messages can
point at the offending line, e.g. ``lib/glfw/proj.bscf:12: ...``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SourceLocation:
    """A position in a configuration file.

    Attributes:
        filename: Path of the configuration file.
        lineno: 1-based line number.
    """

    filename: Path
    lineno: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.lineno}"
