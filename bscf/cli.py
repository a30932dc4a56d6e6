# SPDX-License-Identifier: MIT
"""Command-line interface for bscf.

Usage:
    bscf [dir] [command ...]

Commands run left to right, so settings only affect later commands:

    bscf                      build everything in the current directory
    bscf . c b                clean, then build
    bscf . gnu a clang b      build target a with gcc and target b with clang
    bscf . e f app            echo commands, force, build only app

Because the first positional argument is the directory, ``bscf c``
builds the project in directory ``c``; use ``bscf . c`` to clean.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from bscf.core.errors import BscfError
from bscf.core.project import Project
from bscf.toolchains import find_c_toolchain, toolchain_for

logger = logging.getLogger("bscf")

COMMAND_ALIASES = {
    "c": "clean",
    "sc": "softclean",
    "b": "build",
    "bc": "buildcache",
    "e": "echo",
    "ne": "noecho",
    "f": "force",
    "nf": "noforce",
}

TOOLCHAIN_COMMANDS = ("gnu", "msvc", "clang")

COMMAND_HELP = """\
commands (applied left to right, default: build):
  c,  clean        delete every target's build directory
  sc, softclean    delete objects and cache, keep executables and libraries
  b,  build        generate cache files, then build all targets
  bc, buildcache   generate cache files only
  gnu, clang, msvc switch toolchain for the following commands
  e,  echo         print commands before running them
  ne, noecho       do not print commands (default)
  f,  force        rebuild even if nothing changed
  nf, noforce      skip up-to-date targets (default)
  <target>         build only the named target (and its dependencies)
"""


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


@dataclass
class Session:
    """Settings that commands toggle as the command line is processed."""

    project: Project
    echo: bool = False
    force: bool = False


def cmd_build(session: Session, targets: list[str] | None = None) -> bool:
    """Generate cache files, then build all targets or the named ones."""
    print("Generating build files... ", end="", flush=True)
    graph = session.project.generate()
    print("Done")

    builder = session.project.builder(graph, echo=session.echo, force=session.force)
    if not targets:
        return builder.build()
    results = [builder.build_target(name) for name in targets]
    return all(results)


def cmd_buildcache(session: Session) -> bool:
    print("Generating build files... ", end="", flush=True)
    session.project.generate()
    print("Done")
    return True


def run_commands(session: Session, commands: list[str]) -> int:
    """Apply commands left to right.

    Returns:
        0 if every requested build succeeded, 1 otherwise.
    """
    status = 0
    for token in commands or ["build"]:
        command = COMMAND_ALIASES.get(token, token)
        logger.info("Command: %s", command)
        if command == "clean":
            session.project.clean()
            print("Done cleaning")
        elif command == "softclean":
            session.project.softclean()
        elif command == "build":
            if not cmd_build(session):
                status = 1
        elif command == "buildcache":
            cmd_buildcache(session)
        elif command in TOOLCHAIN_COMMANDS:
            session.project.toolchain = toolchain_for(command)
        elif command == "echo":
            session.echo = True
        elif command == "noecho":
            session.echo = False
        elif command == "force":
            session.force = True
        elif command == "noforce":
            session.force = False
        elif not cmd_build(session, [token]):
            status = 1
    return status


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the bscf CLI."""
    from bscf import __version__

    parser = argparse.ArgumentParser(
        prog="bscf",
        description="Build C/C++ projects described by a proj.bscf file.",
        epilog=COMMAND_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat configuration warnings and duplicate target names as errors",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Project directory containing proj.bscf (default: .)",
    )
    parser.add_argument("commands", nargs="*", help="Commands or target names")

    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.debug)

    directory = Path(args.directory)
    project = Project(directory, toolchain=find_c_toolchain(), strict=args.strict)
    session = Session(project)
    logger.info("Project %s, toolchain %s", directory, project.toolchain)

    try:
        return run_commands(session, args.commands)
    except BscfError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
