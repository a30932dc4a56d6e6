# SPDX-License-Identifier: MIT
"""Registry of pre-packaged third-party projects (``BUILTIN name``).

Most third-party projects do not ship a proj.bscf. For those, the
registry names two repositories: the project's own source repository
and a small "db" repository that holds only the proj.bscf describing
it. Resolving the builtin clones the source and drops the db's
proj.bscf into the working copy root.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from bscf.core.errors import FetchError
from bscf.core.target import CONFIG_FILENAME
from bscf.packages.fetch import SourceFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Builtin:
    """A registry entry.

    Attributes:
        repo: Source repository.
        db: Repository holding the proj.bscf, or None if ``repo``
            already contains one.
    """

    repo: str
    db: str | None = None

    @property
    def single_repo(self) -> bool:
        return self.db is None


BUILTINS: dict[str, Builtin] = {
    "glfw": Builtin(
        repo="https://github.com/glfw/glfw",
        db="https://github.com/bscf-db/glfw",
    ),
    "whereami": Builtin(
        repo="https://github.com/gpakosz/whereami",
        db="https://github.com/bscf-db/whereami",
    ),
}


class BuiltinResolver:
    """Make builtin projects available under a project's ``lib/`` directory."""

    def __init__(
        self,
        fetcher: SourceFetcher,
        builtins: dict[str, Builtin] | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.builtins = BUILTINS if builtins is None else builtins

    def resolve(self, name: str, lib_dir: Path) -> Path:
        """Fetch a builtin into ``lib_dir/name``.

        Args:
            name: Builtin name (e.g. "glfw").
            lib_dir: The including project's library directory.

        Returns:
            The directory now holding the builtin and its proj.bscf.

        Raises:
            FetchError: Unknown builtin, failed retrieval, or no proj.bscf.
        """
        builtin = self.builtins.get(name)
        if builtin is None:
            raise FetchError(name, "unknown builtin")

        dest = Path(lib_dir) / name
        if not self.fetcher.fetch(builtin.repo, dest):
            raise FetchError(name)

        if not builtin.single_repo:
            self._install_config(name, builtin.db, dest)

        if not (dest / CONFIG_FILENAME).is_file():
            raise FetchError(name, f"no {CONFIG_FILENAME} in {dest}")
        return dest

    def _install_config(self, name: str, db_url: str, dest: Path) -> None:
        with tempfile.TemporaryDirectory(
            prefix="bscf-db-", ignore_cleanup_errors=True
        ) as tmp:
            db_dir = Path(tmp) / name
            if not self.fetcher.fetch(db_url, db_dir):
                raise FetchError(name, f"could not fetch {db_url}")
            source = db_dir / CONFIG_FILENAME
            if not source.is_file():
                raise FetchError(name, f"{db_url} has no {CONFIG_FILENAME}")
            target = dest / CONFIG_FILENAME
            if target.exists():
                target.unlink()
            shutil.copyfile(source, target)
            logger.debug("Installed %s from %s", target, db_url)
