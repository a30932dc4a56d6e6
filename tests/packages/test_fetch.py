# SPDX-License-Identifier: MIT
"""Tests for bscf.packages.fetch."""

from __future__ import annotations

from pathlib import Path

import pytest

from bscf.configure.config import Configure, ProgramInfo
from bscf.core.errors import ToolNotFoundError
from bscf.packages.fetch import GitFetcher, SourceFetcher, run_quiet


class GitInstalled(Configure):
    def __init__(self, installed: bool = True) -> None:
        super().__init__()
        self.installed = installed

    def find_program(self, name, *, hints=None, version_flag="--version", required=False):
        if self.installed:
            return ProgramInfo(Path("/usr/bin") / name)
        if required:
            raise ToolNotFoundError(name)
        return None


class GitRecorder:
    def __init__(self, fail: tuple[str, ...] = ()) -> None:
        self.fail = fail
        self.calls: list[tuple[list[str], Path | None]] = []

    def __call__(self, cmd: list[str], cwd: Path | None) -> int:
        self.calls.append((cmd, cwd))
        return 1 if cmd[1] in self.fail else 0


class TestGitFetcher:
    def test_is_a_source_fetcher(self):
        assert isinstance(GitFetcher(config=GitInstalled()), SourceFetcher)

    def test_clone(self, tmp_path, capsys):
        """Test that a missing working copy is cloned into place."""
        git = GitRecorder()
        fetcher = GitFetcher(runner=git, config=GitInstalled())
        dest = tmp_path / "lib" / "zlib"

        assert fetcher.fetch("https://example.com/zlib", dest)

        assert git.calls == [
            (["git", "clone", "https://example.com/zlib", str(dest)], tmp_path / "lib")
        ]
        assert "Cloning zlib" in capsys.readouterr().out

    def test_clone_branch(self, tmp_path):
        git = GitRecorder()
        fetcher = GitFetcher(runner=git, config=GitInstalled())
        dest = tmp_path / "zlib"

        fetcher.fetch("https://example.com/zlib", dest, "v1.3")

        assert git.calls[0][0] == [
            "git",
            "clone",
            "--branch",
            "v1.3",
            "https://example.com/zlib",
            str(dest),
        ]

    def test_clone_failure(self, tmp_path):
        fetcher = GitFetcher(runner=GitRecorder(fail=("clone",)), config=GitInstalled())
        assert not fetcher.fetch("https://example.com/zlib", tmp_path / "zlib")

    def test_update_existing(self, tmp_path, capsys):
        """Test that an existing working copy is reset and pulled."""
        dest = tmp_path / "zlib"
        dest.mkdir()
        git = GitRecorder()
        fetcher = GitFetcher(runner=git, config=GitInstalled())

        assert fetcher.fetch("https://example.com/zlib", dest, "main")

        assert git.calls == [
            (["git", "reset", "--hard"], dest),
            (["git", "pull", "origin", "main"], dest),
        ]
        assert "Updating zlib" in capsys.readouterr().out

    def test_failed_pull_keeps_existing_copy(self, tmp_path):
        dest = tmp_path / "zlib"
        dest.mkdir()
        fetcher = GitFetcher(runner=GitRecorder(fail=("pull",)), config=GitInstalled())

        assert fetcher.fetch("https://example.com/zlib", dest)

    def test_missing_git(self, tmp_path):
        git = GitRecorder()
        fetcher = GitFetcher(runner=git, config=GitInstalled(False))

        with pytest.raises(ToolNotFoundError, match="git"):
            fetcher.fetch("https://example.com/zlib", tmp_path / "zlib")
        assert git.calls == []


class TestRunQuiet:
    def test_missing_program(self, tmp_path):
        assert run_quiet(["definitely-not-a-real-tool-xyz"], tmp_path) == 1
