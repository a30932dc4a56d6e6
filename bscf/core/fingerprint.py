# SPDX-License-Identifier: MIT
"""Content fingerprints and manifests.

A manifest records, for every input of a target, a hash of the input's
path and a fingerprint of its content, one ``<path hash> <content hash>``
line per input in a fixed order. Two manifests are equal only if they
are equal line by line, so reordering inputs counts as a change.

Content is hashed in fixed-size blocks and the block digests are
joined with BLOCK_SEPARATOR, which keeps memory bounded for large
files. The result is a list of block digests, not one whole-file
digest; it is a change detector, not a cryptographic checksum.
"""

from __future__ import annotations

import hashlib
import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

BLOCK_SIZE = 64 * 1024
BLOCK_SEPARATOR = ":"
# Content fingerprint recorded for inputs that do not exist.
MISSING = "missing"


def _digest(data: bytes) -> str:
    return hashlib.sha1(data, usedforsecurity=False).hexdigest()


def hash_path(path: Path | str) -> str:
    """Stable hash of a path string."""
    return _digest(str(path).encode("utf-8"))


def hash_file(path: Path | str, block_size: int = BLOCK_SIZE) -> str:
    """Fingerprint a file's content block by block.

    Every full block is hashed and appended, followed by the final
    (possibly partial, possibly empty) block.

    Returns:
        Block digests joined with BLOCK_SEPARATOR, or MISSING if the
        file cannot be read.
    """
    parts: list[str] = []
    try:
        with open(path, "rb") as f:
            while True:
                block = f.read(block_size)
                parts.append(_digest(block))
                if len(block) < block_size:
                    break
    except OSError as e:
        logger.debug("Cannot fingerprint %s: %s", path, e)
        return MISSING
    return BLOCK_SEPARATOR.join(parts)


def manifest_lines(inputs: list[Path]) -> list[str]:
    """Build manifest lines for inputs, in the given order."""
    return [f"{hash_path(p)} {hash_file(p)}" for p in inputs]


def write_manifest(path: Path, inputs: list[Path]) -> list[str]:
    """Write a manifest for ``inputs`` to ``path``.

    Returns:
        The lines written.
    """
    lines = manifest_lines(inputs)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")
    return lines


def read_manifest(path: Path) -> list[str] | None:
    """Read a manifest, or None if it does not exist."""
    try:
        with open(path, encoding="utf-8") as f:
            return f.read().splitlines()
    except FileNotFoundError:
        return None


def copy_manifest(current: Path, previous: Path) -> bool:
    """Copy the current manifest into the previous slot.

    Any stale previous manifest is overwritten.

    Returns:
        True if there was a current manifest to copy.
    """
    if not current.exists():
        return False
    shutil.copyfile(current, previous)
    return True


def manifests_match(current: Path, previous: Path) -> bool:
    """Check that both manifests exist and are identical line by line."""
    now = read_manifest(current)
    before = read_manifest(previous)
    if now is None or before is None:
        return False
    if len(now) != len(before):
        return False
    return all(a == b for a, b in zip(now, before))
