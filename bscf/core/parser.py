# SPDX-License-Identifier: MIT
"""Reader and tokenizer for proj.bscf files.

The format is line oriented: every non-empty line is a directive name
followed by whitespace-separated arguments. ``#`` starts a comment that
runs to the end of the line. Blank lines (and lines that are blank once
the comment is removed) are dropped before tokenizing, but directives
keep their original line numbers for diagnostics.

Example:
    TARGET EXEC app ALL      # build everything under src/
    DEFINE app VERSION=3
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from bscf.core.errors import MissingConfigError
from bscf.core.target import CONFIG_FILENAME
from bscf.util.source_location import SourceLocation


@dataclass(frozen=True)
class Directive:
    """One tokenized configuration line.

    Attributes:
        name: Directive name (first token), e.g. "TARGET".
        args: Remaining whitespace-separated tokens.
        text: The line with its comment removed and outer whitespace stripped.
        location: File and line the directive came from.
    """

    name: str
    args: tuple[str, ...]
    text: str
    location: SourceLocation

    def arg(self, index: int) -> str | None:
        """Get an argument by position, or None if missing."""
        if index < len(self.args):
            return self.args[index]
        return None

    def rest(self, skip: int) -> str:
        """Get the raw text after the name and the first ``skip`` arguments.

        Used by directives whose last argument is free text, such as
        ``PREBUILD app cp a b``, where internal spacing must survive.
        """
        parts = self.text.split(None, skip + 1)
        if len(parts) > skip + 1:
            return parts[-1].strip()
        return ""


def strip_comment(line: str) -> str:
    return line.split("#", 1)[0]


def parse_text(text: str, filename: Path | str) -> list[Directive]:
    """Tokenize configuration text into directives.

    Args:
        text: File contents.
        filename: Name reported in source locations.

    Returns:
        Directives in file order.
    """
    filename = Path(filename)
    directives: list[Directive] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = strip_comment(raw).strip()
        if not line:
            continue
        tokens = line.split()
        directives.append(
            Directive(
                name=tokens[0],
                args=tuple(tokens[1:]),
                text=line,
                location=SourceLocation(filename, lineno),
            )
        )
    return directives


def config_path(project_dir: Path | str) -> Path:
    return Path(project_dir) / CONFIG_FILENAME


def parse_file(project_dir: Path | str) -> list[Directive]:
    """Read and tokenize the proj.bscf of a project directory.

    Raises:
        MissingConfigError: If the directory has no proj.bscf.
    """
    path = config_path(project_dir)
    if not path.is_file():
        raise MissingConfigError(str(path))
    text = path.read_text(encoding="utf-8", errors="replace")
    return parse_text(text, path)
