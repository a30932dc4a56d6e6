# SPDX-License-Identifier: MIT
"""Tests for bscf.core.commands."""

from __future__ import annotations

import shlex
import sys
from pathlib import Path

import pytest

from bscf.configure.platform import Platform
from bscf.core.commands import CommandGenerator, copy_command, object_name
from bscf.core.graph import TargetGraph
from bscf.core.target import Target, TargetKind
from bscf.toolchains.msvc import msvc_toolchain

P = Path("/p")
Q = Path("/q")


@pytest.fixture
def graph() -> TargetGraph:
    return TargetGraph()


@pytest.fixture
def generator(toolchain, graph, linux) -> CommandGenerator:
    return CommandGenerator(toolchain, graph, platform=linux)


def exec_target(**kwargs) -> Target:
    return Target(
        kind=TargetKind.EXEC,
        name="app",
        path=P,
        sources=[P / "src" / "main.c"],
        include_dirs=[P / "src"],
        **kwargs,
    )


class TestObjectName:
    def test_flattens_relative_path(self):
        target = Target(kind=TargetKind.EXEC, name="app", path=P)
        assert object_name(target, P / "src" / "gfx" / "draw.c") == "src_gfx_draw.c.o"

    def test_suffix(self):
        target = Target(kind=TargetKind.EXEC, name="app", path=P)
        assert object_name(target, P / "main.cpp", ".obj") == "main.cpp.obj"


class TestGenerate:
    def test_simple_executable(self, generator, graph):
        """Test the compile and link commands of a one-file executable."""
        app = graph.add(exec_target())

        commands = generator.generate(app, create_dirs=False)

        assert commands == [
            "gcc -c /p/src/main.c -o /p/build/obj/src_main.c.o -I/p/src",
            "g++ /p/build/obj/src_main.c.o -o /p/build/bin/app",
        ]

    def test_cpp_uses_cxx(self, generator, graph):
        app = graph.add(exec_target())
        app.sources = [P / "src" / "main.cc"]

        commands = generator.generate(app, create_dirs=False)

        assert commands[0].startswith("g++ -c /p/src/main.cc")

    def test_defines_before_includes(self, generator, graph):
        app = graph.add(exec_target(defines=["VERSION=3", "DEBUG"]))

        compile_cmd = generator.generate(app, create_dirs=False)[0]

        assert compile_cmd.endswith("-DVERSION=3 -DDEBUG -I/p/src")

    def test_headers_and_unknown_files_skipped(self, generator, graph):
        """Test that headers and non-sources get no compile command."""
        app = graph.add(exec_target())
        app.sources = [P / "src" / "a.h", P / "src" / "main.c", P / "notes.txt"]

        commands = generator.generate(app, create_dirs=False)

        assert len(commands) == 2
        assert "a.h" not in " ".join(commands)
        assert commands[1] == "g++ /p/build/obj/src_main.c.o -o /p/build/bin/app"

    def test_prebuild_and_postbuild_order(self, generator, graph):
        app = graph.add(exec_target(prebuild=["echo pre"], postbuild=["echo post"]))

        commands = generator.generate(app, create_dirs=False)

        assert commands[0] == "echo pre"
        assert commands[-1] == "echo post"
        assert len(commands) == 4

    def test_static_library(self, generator, graph):
        core = graph.add(
            Target(kind=TargetKind.SLIB, name="core", path=Q, sources=[Q / "a.c", Q / "b.c"])
        )

        commands = generator.generate(core, create_dirs=False)

        assert commands[-1] == "ar rcs /q/build/lib/libcore.a /q/build/obj/a.c.o /q/build/obj/b.c.o"

    def test_dynamic_library(self, generator, graph):
        """Test that shared libraries compile with -fPIC and link with -shared."""
        plug = graph.add(
            Target(kind=TargetKind.DLIB, name="plug", path=Q, sources=[Q / "p.c"], libs=["m"])
        )

        commands = generator.generate(plug, create_dirs=False)

        assert commands[0] == "gcc -c /q/p.c -o /q/build/obj/p.c.o -fPIC"
        assert commands[1] == "g++ -shared /q/build/obj/p.c.o -o /q/build/bin/libplug.so -lm"

    def test_interface_has_no_compile_or_link(self, generator, graph):
        hdrs = graph.add(
            Target(
                kind=TargetKind.INTERFACE,
                name="hdrs",
                path=Q,
                sources=[Q / "x.c"],
                postbuild=["echo done"],
            )
        )

        assert generator.generate(hdrs, create_dirs=False) == ["echo done"]


class TestDependencies:
    def test_static_dependency_link_flags(self, generator, graph):
        """Test that a static dependency adds its search path, itself and its libs."""
        graph.add(Target(kind=TargetKind.SLIB, name="core", path=Q, libs=["z"]))
        app = graph.add(exec_target(libs=["m"], dependencies=["core"]))

        link = generator.generate(app, create_dirs=False)[-1]

        assert link.endswith("-o /p/build/bin/app -lm -L/q/build/lib -lcore -lz")

    def test_interface_dependency_contributes_libs_and_includes(self, generator, graph):
        graph.add(
            Target(
                kind=TargetKind.INTERFACE,
                name="hdrs",
                path=Q,
                libs=["pthread"],
                include_dirs=[Q / "include"],
            )
        )
        app = graph.add(exec_target(dependencies=["hdrs"]))

        commands = generator.generate(app, create_dirs=False)

        assert commands[0].endswith("-I/q/include -I/p/src")
        assert commands[-1].endswith("-o /p/build/bin/app -lpthread")

    def test_dynamic_dependency_copied(self, generator, graph):
        """Test that a shared-library dependency is copied next to the consumer."""
        graph.add(Target(kind=TargetKind.DLIB, name="plug", path=Q))
        app = graph.add(exec_target(prebuild=["echo pre"], dependencies=["plug"]))

        commands = generator.generate(app, create_dirs=False)

        python = shlex.quote(sys.executable)
        assert commands[1] == (
            f"{python} -m bscf.util.commands copy "
            "/q/build/bin/libplug.so /p/build/bin/libplug.so"
        )
        assert commands[-1].endswith("-L/q/build/bin -lplug")

    def test_executable_dependency_adds_nothing(self, generator, graph):
        graph.add(Target(kind=TargetKind.EXEC, name="tool", path=Q))
        app = graph.add(exec_target(dependencies=["tool"]))

        assert generator.generate(app, create_dirs=False)[-1] == (
            "g++ /p/build/obj/src_main.c.o -o /p/build/bin/app"
        )


class TestToolchainsAndPlatforms:
    def test_msvc_object_suffix(self, graph, linux):
        app = graph.add(exec_target())
        generator = CommandGenerator(msvc_toolchain(), graph, platform=linux)

        commands = generator.generate(app, create_dirs=False)

        assert commands[0] == "cl -c /p/src/main.c -o /p/build/obj/src_main.c.obj -I/p/src"

    def test_copy_command_quotes_spaces(self):
        command = copy_command(Path("/a b/x.so"), Path("/c/x.so"), Platform(os="linux"))
        assert "'/a b/x.so'" in command


class TestCreateOutputDirs:
    def test_creates_directories(self, tmp_path, toolchain, graph, linux):
        app = graph.add(
            Target(kind=TargetKind.EXEC, name="app", path=tmp_path, sources=[])
        )

        CommandGenerator(toolchain, graph, platform=linux).generate(app)

        assert (tmp_path / "build" / "obj").is_dir()
        assert (tmp_path / "build" / "bin").is_dir()
        assert (tmp_path / "build" / "cache").is_dir()

    def test_interface_only_gets_cache_dir(self, tmp_path, toolchain, graph, linux):
        hdrs = graph.add(Target(kind=TargetKind.INTERFACE, name="hdrs", path=tmp_path))

        CommandGenerator(toolchain, graph, platform=linux).generate(hdrs)

        assert (tmp_path / "build" / "cache").is_dir()
        assert not (tmp_path / "build" / "obj").exists()
