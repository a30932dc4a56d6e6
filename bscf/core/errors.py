# SPDX-License-Identifier: MIT
"""Custom exceptions for bscf.

All bscf exceptions inherit from BscfError, which includes
optional source location information for better error messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bscf.core.expander import Diagnostic
    from bscf.util.source_location import SourceLocation


class BscfError(Exception):
    """Base class for all bscf exceptions.

    Attributes:
        message: The error message.
        location: Optional source location where the error occurred.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


class ConfigError(BscfError):
    """Fatal configuration error.

    Raised when the configuration cannot be expanded at all. Unlike
    recoverable parse problems, these abort the whole run.
    """


class MissingConfigError(ConfigError):
    """A project directory has no proj.bscf.

    Attributes:
        path: The configuration file that was expected.
    """

    def __init__(
        self,
        path: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.path = path
        super().__init__(f"configuration file not found: {path}", location)


class ToolNotFoundError(ConfigError):
    """Required tool was not found.

    Attributes:
        tool: The name of the tool that was not found.
    """

    def __init__(
        self,
        tool: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.tool = tool
        super().__init__(f"tool not found: {tool}", location)


class FetchError(ConfigError):
    """An external project could not be made available.

    Attributes:
        name: The sub-project or builtin name.
        reason: Why it could not be made available.
    """

    def __init__(
        self,
        name: str,
        reason: str = "fetch failed",
        location: SourceLocation | None = None,
    ) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"{name}: {reason}", location)


class DuplicateTargetError(ConfigError):
    """Two targets share a name (strict mode only).

    Attributes:
        name: The duplicated target name.
    """

    def __init__(
        self,
        name: str,
        location: SourceLocation | None = None,
    ) -> None:
        self.name = name
        super().__init__(f"duplicate target name: {name}", location)


class StrictModeError(ConfigError):
    """Parse warnings promoted to errors.

    Attributes:
        diagnostics: The warnings collected during expansion.
    """

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        lines = "\n".join(f"  {d}" for d in diagnostics)
        super().__init__(f"{len(diagnostics)} configuration warning(s):\n{lines}")


class DependencyCycleError(BscfError):
    """Circular dependency detected in the target graph.

    Attributes:
        cycle: The target names forming the cycle.
    """

    def __init__(
        self,
        cycle: list[str],
        location: SourceLocation | None = None,
    ) -> None:
        self.cycle = cycle
        cycle_str = " -> ".join(cycle)
        super().__init__(f"dependency cycle: {cycle_str}", location)
