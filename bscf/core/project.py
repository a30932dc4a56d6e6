# SPDX-License-Identifier: MIT
"""Project: the entry point tying expansion, caching and building together.

Example:
    project = Project("path/to/proj", toolchain=gcc_toolchain())
    graph = project.generate()
    ok = project.builder(graph).build()
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from bscf.configure.platform import Platform, get_platform
from bscf.core.cache import BuildCache, generate_cache
from bscf.core.errors import StrictModeError
from bscf.core.executor import Builder, Runner
from bscf.core.expander import Expander, ParseResult

if TYPE_CHECKING:
    from bscf.core.graph import TargetGraph
    from bscf.core.target import Target
    from bscf.packages.fetch import SourceFetcher
    from bscf.tools.toolchain import Toolchain

logger = logging.getLogger(__name__)


class Project:
    """A directory containing a proj.bscf.

    Every operation re-reads the configuration, so a toolchain switch
    between operations takes effect immediately.

    Attributes:
        root_dir: Project directory.
        toolchain: Active toolchain.
        platform: Host platform.
        strict: Treat configuration warnings and duplicate names as errors.
    """

    def __init__(
        self,
        root_dir: Path | str = ".",
        *,
        toolchain: Toolchain,
        platform: Platform | None = None,
        fetcher: SourceFetcher | None = None,
        strict: bool = False,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.toolchain = toolchain
        self.platform = platform or get_platform()
        self.strict = strict
        self._fetcher = fetcher

    def load(self) -> ParseResult:
        """Expand the configuration into a target graph.

        Raises:
            ConfigError: On fatal configuration problems.
            StrictModeError: In strict mode, if any warning was reported.
        """
        expander = Expander(
            self.toolchain,
            platform=self.platform,
            fetcher=self._fetcher,
            strict=self.strict,
        )
        result = expander.expand(self.root_dir)
        if self.strict and result.diagnostics:
            raise StrictModeError(result.diagnostics)
        return result

    def generate(self) -> TargetGraph:
        """Expand the configuration and write every target's cache files.

        Raises:
            DependencyCycleError: If dependency edges loop.
        """
        graph = self.load().graph
        graph.check_cycles()
        generate_cache(graph, self.toolchain, platform=self.platform)
        return graph

    def builder(
        self,
        graph: TargetGraph,
        *,
        echo: bool = False,
        force: bool = False,
        runner: Runner | None = None,
    ) -> Builder:
        return Builder(
            graph,
            cache=BuildCache(self.platform),
            runner=runner,
            echo=echo,
            force=force,
        )

    def clean(self) -> list[Target]:
        """Delete every target's build directory."""
        targets = list(self.load().graph)
        for target in targets:
            print(f"Cleaning {target.name}")
            if target.build_dir.exists():
                shutil.rmtree(target.build_dir)
        return targets

    def softclean(self) -> list[Target]:
        """Delete objects and cache files, keeping final artifacts."""
        targets = list(self.load().graph)
        for target in targets:
            print(f"Soft cleaning {target.name}")
            for directory in (target.obj_dir, target.cache_dir):
                if directory.exists():
                    shutil.rmtree(directory)
        return targets

    def __repr__(self) -> str:
        return f"Project({str(self.root_dir)!r}, toolchain={self.toolchain.name})"
