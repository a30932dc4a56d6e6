# SPDX-License-Identifier: MIT
"""Configure context for bscf.

The Configure class answers "is this tool installed, and where?" for
the toolchain selection and for the version-control collaborators.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from bscf.configure.platform import Platform, get_platform
from bscf.core.errors import ToolNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class ProgramInfo:
    """Information about a found program.

    Attributes:
        path: Path to the program executable.
        version: Version string if detected.
    """

    path: Path
    version: str | None = None


class Configure:
    """Context for tool discovery.

    Lookups are memoised per instance, so probing the same compiler
    twice in one invocation only runs it once.

    Example:
        config = Configure()
        git = config.find_program("git", required=True)
        print(f"Found git at {git.path}")

    Attributes:
        platform: The detected platform.
    """

    def __init__(self, platform: Platform | None = None) -> None:
        self.platform = platform or get_platform()
        self._programs: dict[str, ProgramInfo | None] = {}

    def find_program(
        self,
        name: str,
        *,
        hints: list[Path | str] | None = None,
        version_flag: str | None = "--version",
        required: bool = False,
    ) -> ProgramInfo | None:
        """Find a program on the system.

        Searches for the program in:
        1. Hint paths (if provided)
        2. PATH environment variable

        Args:
            name: Program name (e.g., 'gcc', 'git').
            hints: Additional paths to search.
            version_flag: Flag to get version, or None to skip detection.
            required: If True, raise error if not found.

        Returns:
            ProgramInfo if found, None otherwise.

        Raises:
            ToolNotFoundError: If required and not found.
        """
        if name in self._programs:
            info = self._programs[name]
        else:
            info = self._search(name, hints, version_flag)
            self._programs[name] = info

        if info is None and required:
            raise ToolNotFoundError(name)
        return info

    def has_program(self, name: str) -> bool:
        return self.find_program(name, version_flag=None) is not None

    def _search(
        self,
        name: str,
        hints: list[Path | str] | None,
        version_flag: str | None,
    ) -> ProgramInfo | None:
        found_path: Path | None = None

        if hints:
            for hint in hints:
                hint_path = Path(hint)
                if hint_path.is_file() and os.access(hint_path, os.X_OK):
                    found_path = hint_path
                    break
                candidate = hint_path / name
                if self.platform.is_windows and not candidate.suffix:
                    candidate = candidate.with_suffix(".exe")
                if candidate.is_file() and os.access(candidate, os.X_OK):
                    found_path = candidate
                    break

        if found_path is None:
            found_path = self._which(name)

        if found_path is None:
            logger.debug("Program not found: %s", name)
            return None

        version = None
        if version_flag:
            version = self._get_program_version(found_path, version_flag)
        logger.debug("Found %s at %s (%s)", name, found_path, version or "unknown")
        return ProgramInfo(path=found_path, version=version)

    def _which(self, name: str) -> Path | None:
        """Find a program in PATH using shutil.which."""
        result = shutil.which(name)
        if result:
            return Path(result)
        return None

    def _get_program_version(self, path: Path, version_flag: str) -> str | None:
        """Try to get the version of a program."""
        try:
            result = subprocess.run(
                [str(path), version_flag],
                capture_output=True,
                text=True,
                timeout=5,
            )
            if result.returncode == 0:
                # First non-empty line
                for line in result.stdout.split("\n"):
                    line = line.strip()
                    if line:
                        return line
            return None
        except (subprocess.TimeoutExpired, OSError):
            return None

    def __repr__(self) -> str:
        return f"Configure(platform={self.platform.os})"
