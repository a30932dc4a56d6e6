# SPDX-License-Identifier: MIT
"""Retrieval of sub-projects from version control and the builtin registry."""

from bscf.packages.builtins import BUILTINS, Builtin, BuiltinResolver
from bscf.packages.fetch import GitFetcher, SourceFetcher

__all__ = [
    "BUILTINS",
    "Builtin",
    "BuiltinResolver",
    "GitFetcher",
    "SourceFetcher",
]
