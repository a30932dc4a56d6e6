# SPDX-License-Identifier: MIT
"""Version-control retrieval of sub-projects.

The expander only needs one promise from a fetcher: after ``fetch()``
returns True, ``dest`` is a working copy of ``url``. GitFetcher keeps
that promise with ``git clone`` for new copies and ``git reset --hard``
plus ``git pull`` for existing ones.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

from bscf.configure.config import Configure

logger = logging.getLogger(__name__)

# (argv, cwd) -> exit status
Runner = Callable[[list[str], "Path | None"], int]


def run_quiet(cmd: list[str], cwd: Path | None = None) -> int:
    """Run a command with its output suppressed.

    Returns:
        The exit status, or 1 if the command could not be started.
    """
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        return result.returncode
    except OSError as e:
        logger.error("Failed to run %s: %s", cmd[0], e)
        return 1


@runtime_checkable
class SourceFetcher(Protocol):
    """Protocol for source-retrieval services."""

    def fetch(self, url: str, dest: Path, branch: str | None = None) -> bool:
        """Make ``dest`` an up-to-date working copy of ``url``.

        Returns:
            True if a working copy is present at ``dest`` afterwards.
        """
        ...


class GitFetcher:
    """Clone or update git working copies.

    Attributes:
        git: Name or path of the git executable.
    """

    def __init__(
        self,
        git: str = "git",
        *,
        runner: Runner | None = None,
        config: Configure | None = None,
    ) -> None:
        self.git = git
        self._runner = runner or run_quiet
        self._config = config or Configure()

    def ensure_available(self) -> None:
        """Check that git is installed.

        Raises:
            ToolNotFoundError: If git cannot be found.
        """
        self._config.find_program(self.git, version_flag=None, required=True)

    def fetch(self, url: str, dest: Path, branch: str | None = None) -> bool:
        self.ensure_available()
        dest = Path(dest)
        if dest.exists():
            print(f"Updating {dest.name}")
            # Local edits would make pull report "up to date"; drop them first.
            self._runner([self.git, "reset", "--hard"], dest)
            pull = [self.git, "pull", "origin"]
            if branch:
                pull.append(branch)
            if self._runner(pull, dest) != 0:
                logger.warning("Could not update %s; using existing copy", dest)
            return True

        print(f"Cloning {dest.name}")
        dest.parent.mkdir(parents=True, exist_ok=True)
        clone = [self.git, "clone"]
        if branch:
            clone.extend(["--branch", branch])
        clone.extend([url, str(dest)])
        if self._runner(clone, dest.parent) != 0:
            logger.error("git clone %s failed", url)
            return False
        return True
