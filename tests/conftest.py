# SPDX-License-Identifier: MIT
"""Shared fixtures for bscf tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from bscf.configure.platform import Platform
from bscf.toolchains.gcc import gcc_toolchain
from bscf.tools.toolchain import Toolchain


def write_project(directory: Path, config: str, files: dict[str, str] | None = None) -> Path:
    """Create a project directory with a proj.bscf and extra files."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "proj.bscf").write_text(config)
    for name, content in (files or {}).items():
        path = directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return directory


class RecordingRunner:
    """Command runner that records commands instead of running them.

    Commands containing any of ``fail_on`` exit with status 1.
    """

    def __init__(self, fail_on: tuple[str, ...] = ()) -> None:
        self.fail_on = fail_on
        self.calls: list[tuple[str, Path]] = []

    def __call__(self, command: str, cwd: Path) -> int:
        self.calls.append((command, cwd))
        if any(marker in command for marker in self.fail_on):
            return 1
        return 0

    @property
    def commands(self) -> list[str]:
        return [command for command, _ in self.calls]


class FakeFetcher:
    """SourceFetcher that materializes canned projects instead of cloning.

    Attributes:
        projects: Maps url to a dict of {relative path: content}.
        fetched: (url, dest, branch) for every fetch call.
    """

    def __init__(self, projects: dict[str, dict[str, str]] | None = None) -> None:
        self.projects = projects or {}
        self.fetched: list[tuple[str, Path, str | None]] = []

    def fetch(self, url: str, dest: Path, branch: str | None = None) -> bool:
        self.fetched.append((url, dest, branch))
        files = self.projects.get(url)
        if files is None:
            return False
        for name, content in files.items():
            path = Path(dest) / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        Path(dest).mkdir(parents=True, exist_ok=True)
        return True


@pytest.fixture
def toolchain() -> Toolchain:
    return gcc_toolchain()


@pytest.fixture
def linux() -> Platform:
    return Platform(os="linux")


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def make_project():
    """Factory fixture wrapping write_project."""
    return write_project


@pytest.fixture
def make_runner():
    """Factory fixture for RecordingRunner with failing command markers."""

    def factory(*fail_on: str) -> RecordingRunner:
        return RecordingRunner(fail_on)

    return factory
