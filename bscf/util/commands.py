# SPDX-License-Identifier: MIT
"""Cross-platform command helpers for generated command lists.

Generated commands call these through the interpreter so that they
behave the same with cmd.exe and POSIX shells:

    python -m bscf.util.commands copy <src> <dest>
"""

from __future__ import annotations

import shutil
import sys
from pathlib import Path


def copy(src: str, dest: str) -> None:
    """Copy a file, creating parent directories as needed."""
    dest_path = Path(dest)
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dest)


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Usage: python -m bscf.util.commands copy <src> <dest>", file=sys.stderr)
        return 1

    cmd = args[0]
    if cmd == "copy":
        if len(args) != 3:
            print(
                "Usage: python -m bscf.util.commands copy <src> <dest>",
                file=sys.stderr,
            )
            return 1
        try:
            copy(args[1], args[2])
        except OSError as e:
            print(f"copy failed: {e}", file=sys.stderr)
            return 1
        return 0

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
