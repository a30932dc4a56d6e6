# SPDX-License-Identifier: MIT
"""Tests for bscf.configure.config."""

from __future__ import annotations

import os
import sys

import pytest

from bscf.configure.config import Configure, ProgramInfo
from bscf.core.errors import ToolNotFoundError


def make_executable(directory, name: str):
    path = directory / name
    path.write_text("#!/bin/sh\necho fake 1.0\n")
    path.chmod(0o755)
    return path


class TestFindProgram:
    def test_find_python(self):
        """Test finding the running interpreter by its full path as a hint."""
        config = Configure()
        info = config.find_program("python", hints=[sys.executable], version_flag=None)

        assert isinstance(info, ProgramInfo)
        assert os.path.samefile(info.path, sys.executable)

    def test_missing_program(self):
        config = Configure()
        assert config.find_program("definitely-not-a-real-tool-xyz") is None
        assert not config.has_program("definitely-not-a-real-tool-xyz")

    def test_required_missing_raises(self):
        config = Configure()
        with pytest.raises(ToolNotFoundError, match="definitely-not-a-real-tool-xyz"):
            config.find_program("definitely-not-a-real-tool-xyz", required=True)

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell script")
    def test_hint_directory_and_version(self, tmp_path):
        make_executable(tmp_path, "fakecc")
        config = Configure()

        info = config.find_program("fakecc", hints=[tmp_path])

        assert info is not None
        assert info.path == tmp_path / "fakecc"
        assert info.version == "fake 1.0"

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell script")
    def test_results_memoised(self, tmp_path):
        """Test that a found program is remembered even after it disappears."""
        tool = make_executable(tmp_path, "fakecc")
        config = Configure()
        first = config.find_program("fakecc", hints=[tmp_path], version_flag=None)

        tool.unlink()

        assert config.find_program("fakecc", hints=[tmp_path]) is first
