# SPDX-License-Identifier: MIT
"""Directive interpreter and recursive graph expansion.

The Expander walks the directives of a proj.bscf, evaluating ``IF``
blocks, creating targets and applying mutating directives, and recurses
into sub-projects pulled in by ``INCLUDE``, ``GITINCLUDE`` and
``BUILTIN``. Every file of one expansion appends to the same
TargetGraph.

Ordering contract: a directive that mutates a target (``DEPEND``,
``DEFINE``, ``LIB``, ``INCDIR``, ``PREBUILD``, ``POSTBUILD``, ``VENDOR``)
applies to the first target of that name declared *before* it, in this
file or in anything expanded earlier. If no such target exists yet the
directive does nothing and nothing is reported.

Parsing is lenient. Unknown directives, unknown target kinds, unknown
``IF`` predicates and malformed lines are recorded as Diagnostics and
skipped. Only a missing proj.bscf, a missing git, or a failed fetch
stops the expansion (by raising a ConfigError).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from bscf.configure.platform import PLATFORM_NAMES, Platform, get_platform
from bscf.core.errors import DependencyCycleError, FetchError, MissingConfigError
from bscf.core.graph import TargetGraph
from bscf.core.parser import Directive, parse_file
from bscf.core.target import Target, TargetKind
from bscf.packages.builtins import BuiltinResolver
from bscf.packages.fetch import GitFetcher, SourceFetcher
from bscf.tools.toolchain import Toolchain, ToolchainFamily, is_header, is_source
from bscf.util.source_location import SourceLocation

logger = logging.getLogger(__name__)

# Sub-projects live under <project>/lib/<name>.
LIB_DIRNAME = "lib"
# Directory walked by the ALL source keyword.
DEFAULT_SOURCE_DIRNAME = "src"

COMPILER_NAMES = tuple(family.value for family in ToolchainFamily)


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem found while expanding the configuration.

    Attributes:
        message: What went wrong.
        location: Where it went wrong, if known.
    """

    message: str
    location: SourceLocation | None = None

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


@dataclass
class ParseResult:
    """Outcome of an expansion: the best-effort graph plus its warnings."""

    graph: TargetGraph
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


Handler = Callable[[Directive, Path, TargetGraph, list[Path]], None]


class Expander:
    """Expand a project directory into a TargetGraph.

    Attributes:
        toolchain: Active toolchain, for ``IF COMPILER`` predicates.
        platform: Host platform, for ``IF PLATFORM`` predicates.
        strict: Passed to the TargetGraph (reject duplicate names).
    """

    def __init__(
        self,
        toolchain: Toolchain,
        *,
        platform: Platform | None = None,
        fetcher: SourceFetcher | None = None,
        builtins: BuiltinResolver | None = None,
        strict: bool = False,
    ) -> None:
        self.toolchain = toolchain
        self.platform = platform or get_platform()
        self.strict = strict
        self._fetcher = fetcher
        self._builtins = builtins
        self.diagnostics: list[Diagnostic] = []
        self._handlers: dict[str, Handler] = {
            "TARGET": self._target,
            "INCLUDE": self._include,
            "GITINCLUDE": self._gitinclude,
            "BUILTIN": self._builtin,
            "DEPEND": self._depend,
            "DEFINE": self._define,
            "LIB": self._lib,
            "INCDIR": self._incdir,
            "PREBUILD": self._prebuild,
            "POSTBUILD": self._postbuild,
            "VENDOR": self._vendor,
        }

    @property
    def fetcher(self) -> SourceFetcher:
        if self._fetcher is None:
            self._fetcher = GitFetcher()
        return self._fetcher

    @property
    def builtins(self) -> BuiltinResolver:
        if self._builtins is None:
            self._builtins = BuiltinResolver(self.fetcher)
        return self._builtins

    def expand(self, project_dir: Path | str) -> ParseResult:
        """Expand a project directory and everything it includes.

        Args:
            project_dir: Directory containing the root proj.bscf.

        Returns:
            ParseResult with the target graph and collected diagnostics.

        Raises:
            MissingConfigError: If any expanded directory has no proj.bscf.
            ToolNotFoundError: If git is needed but not installed.
            FetchError: If a sub-project cannot be retrieved.
            DependencyCycleError: If projects include each other.
        """
        self.diagnostics = []
        graph = TargetGraph(strict=self.strict)
        self._expand_dir(Path(project_dir), graph, [], None)
        return ParseResult(graph, list(self.diagnostics))

    def _warn(self, message: str, location: SourceLocation | None) -> None:
        diagnostic = Diagnostic(message, location)
        logger.warning("%s", diagnostic)
        self.diagnostics.append(diagnostic)

    def _expand_dir(
        self,
        directory: Path,
        graph: TargetGraph,
        stack: list[Path],
        location: SourceLocation | None,
    ) -> None:
        directory = directory.resolve()
        if directory in stack:
            chain = [str(p) for p in stack[stack.index(directory) :]]
            raise DependencyCycleError(chain + [str(directory)], location)
        try:
            directives = parse_file(directory)
        except MissingConfigError as e:
            if location is None:
                raise
            raise MissingConfigError(e.path, location) from None

        logger.debug("Expanding %s", directory)
        stack.append(directory)
        try:
            self._run(directives, directory, graph, stack)
        finally:
            stack.pop()

    def _run(
        self,
        directives: list[Directive],
        directory: Path,
        graph: TargetGraph,
        stack: list[Path],
    ) -> None:
        open_blocks: list[Directive] = []
        i = 0
        while i < len(directives):
            directive = directives[i]
            i += 1
            if directive.name == "IF":
                if self._condition(directive):
                    open_blocks.append(directive)
                else:
                    i = self._skip_block(directives, i, directive)
                continue
            if directive.name == "ENDIF":
                if open_blocks:
                    open_blocks.pop()
                else:
                    self._warn("ENDIF without matching IF", directive.location)
                continue
            handler = self._handlers.get(directive.name)
            if handler is None:
                self._warn(f"unknown directive: {directive.name}", directive.location)
                continue
            handler(directive, directory, graph, stack)

        for directive in open_blocks:
            self._warn("IF without matching ENDIF", directive.location)

    # Conditionals

    def _condition(self, directive: Directive) -> bool:
        """Evaluate ``IF [NOT] PLATFORM|COMPILER <value>``.

        Unknown predicates or values are reported and evaluate to false,
        with or without NOT, so the block is skipped.
        """
        args = list(directive.args)
        negate = bool(args) and args[0] == "NOT"
        if negate:
            args = args[1:]
        if len(args) < 2:
            self._warn("IF expects PLATFORM or COMPILER and a value", directive.location)
            return False

        predicate, value = args[0], args[1]
        if predicate == "PLATFORM":
            if value not in PLATFORM_NAMES:
                self._warn(f"unknown platform: {value}", directive.location)
                return False
            result = self.platform.matches(value)
        elif predicate == "COMPILER":
            if value not in COMPILER_NAMES:
                self._warn(f"unknown compiler: {value}", directive.location)
                return False
            result = self.toolchain.name == value
        else:
            self._warn(f"unknown IF condition: {predicate}", directive.location)
            return False
        return result != negate

    def _skip_block(self, directives: list[Directive], start: int, opening: Directive) -> int:
        """Return the index just past the ENDIF matching ``opening``."""
        depth = 1
        for j in range(start, len(directives)):
            name = directives[j].name
            if name == "IF":
                depth += 1
            elif name == "ENDIF":
                depth -= 1
                if depth == 0:
                    return j + 1
        self._warn("IF without matching ENDIF", opening.location)
        return len(directives)

    # Target creation

    def _target(
        self, directive: Directive, directory: Path, graph: TargetGraph, stack: list[Path]
    ) -> None:
        kind_name = directive.arg(0)
        name = directive.arg(1)
        if kind_name is None or name is None:
            self._warn("TARGET expects a kind and a name", directive.location)
            return
        try:
            kind = TargetKind(kind_name)
        except ValueError:
            self._warn(f"unknown target kind: {kind_name}", directive.location)
            return

        target = Target(kind=kind, name=name, path=directory, defined_at=directive.location)
        self._collect_sources(target, directive.args[2:], directory, directive)
        graph.add(target)

    def _collect_sources(
        self,
        target: Target,
        tokens: tuple[str, ...],
        directory: Path,
        directive: Directive,
    ) -> None:
        pending: str | None = None  # GLOB or RECURSE waiting for its directory
        for token in tokens:
            if pending is not None:
                self._add_directory(
                    target, directory / token, pending == "RECURSE", False, directive
                )
                pending = None
            elif token == "ALL":
                self._add_directory(
                    target, directory / DEFAULT_SOURCE_DIRNAME, True, True, directive
                )
            elif token in ("GLOB", "RECURSE"):
                pending = token
            else:
                target.sources.append(directory / token)
        if pending is not None:
            self._warn(f"{pending} expects a directory", directive.location)

    def _add_directory(
        self,
        target: Target,
        source_dir: Path,
        recursive: bool,
        with_headers: bool,
        directive: Directive,
    ) -> None:
        target.include_dirs.append(source_dir)
        if not source_dir.is_dir():
            self._warn(f"source directory not found: {source_dir}", directive.location)
            return
        entries = source_dir.rglob("*") if recursive else source_dir.iterdir()
        for path in sorted(entries):
            if not path.is_file():
                continue
            if is_source(path) or (with_headers and is_header(path)):
                target.sources.append(path)

    # Sub-projects

    def _include(
        self, directive: Directive, directory: Path, graph: TargetGraph, stack: list[Path]
    ) -> None:
        subdir = directive.arg(0)
        if subdir is None:
            self._warn("INCLUDE expects a directory", directive.location)
            return
        self._expand_dir(directory / LIB_DIRNAME / subdir, graph, stack, directive.location)

    def _gitinclude(
        self, directive: Directive, directory: Path, graph: TargetGraph, stack: list[Path]
    ) -> None:
        url = directive.arg(0)
        name = directive.arg(1)
        if url is None or name is None:
            self._warn("GITINCLUDE expects a url and a name", directive.location)
            return
        dest = directory / LIB_DIRNAME / name
        if not self.fetcher.fetch(url, dest, directive.arg(2)):
            raise FetchError(name, f"could not fetch {url}", directive.location)
        self._expand_vendored(dest, graph, stack, directive.location)

    def _builtin(
        self, directive: Directive, directory: Path, graph: TargetGraph, stack: list[Path]
    ) -> None:
        name = directive.arg(0)
        if name is None:
            self._warn("BUILTIN expects a name", directive.location)
            return
        try:
            dest = self.builtins.resolve(name, directory / LIB_DIRNAME)
        except FetchError as e:
            raise FetchError(e.name, e.reason, directive.location) from None
        self._expand_vendored(dest, graph, stack, directive.location)

    def _expand_vendored(
        self,
        directory: Path,
        graph: TargetGraph,
        stack: list[Path],
        location: SourceLocation,
    ) -> None:
        start = len(graph)
        self._expand_dir(directory, graph, stack, location)
        for target in graph.since(start):
            target.vendored = True

    # Mutating directives

    def _lookup(self, directive: Directive, graph: TargetGraph, nargs: int) -> Target | None:
        """Find the target a mutating directive names.

        Reports a directive with too few arguments; an unknown target
        name is silently ignored.
        """
        if len(directive.args) < nargs:
            self._warn(
                f"{directive.name} expects {nargs} argument(s)", directive.location
            )
            return None
        return graph.get(directive.args[0])

    def _depend(
        self, directive: Directive, directory: Path, graph: TargetGraph, stack: list[Path]
    ) -> None:
        target = self._lookup(directive, graph, 2)
        if target is not None:
            target.dependencies.append(directive.args[1])

    def _define(
        self, directive: Directive, directory: Path, graph: TargetGraph, stack: list[Path]
    ) -> None:
        target = self._lookup(directive, graph, 2)
        if target is not None:
            target.defines.append(directive.rest(1))

    def _lib(
        self, directive: Directive, directory: Path, graph: TargetGraph, stack: list[Path]
    ) -> None:
        target = self._lookup(directive, graph, 2)
        if target is not None:
            target.libs.append(directive.args[1])

    def _incdir(
        self, directive: Directive, directory: Path, graph: TargetGraph, stack: list[Path]
    ) -> None:
        target = self._lookup(directive, graph, 2)
        if target is not None:
            target.include_dirs.append(directory / directive.args[1])

    def _prebuild(
        self, directive: Directive, directory: Path, graph: TargetGraph, stack: list[Path]
    ) -> None:
        target = self._lookup(directive, graph, 2)
        if target is not None:
            target.prebuild.append(directive.rest(1))

    def _postbuild(
        self, directive: Directive, directory: Path, graph: TargetGraph, stack: list[Path]
    ) -> None:
        target = self._lookup(directive, graph, 2)
        if target is not None:
            target.postbuild.append(directive.rest(1))

    def _vendor(
        self, directive: Directive, directory: Path, graph: TargetGraph, stack: list[Path]
    ) -> None:
        target = self._lookup(directive, graph, 1)
        if target is not None:
            target.vendored = True


def expand(project_dir: Path | str, toolchain: Toolchain, **kwargs: object) -> ParseResult:
    """Expand a project directory (see Expander for keyword arguments)."""
    return Expander(toolchain, **kwargs).expand(project_dir)  # type: ignore[arg-type]
