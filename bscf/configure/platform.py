# SPDX-License-Identifier: MIT
"""Host platform detection.

The platform decides two things: which ``IF PLATFORM`` predicates hold,
and how build artifacts are named (``app.exe`` vs ``app``, ``foo.lib``
vs ``libfoo.a`` and so on).
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import lru_cache

# Names accepted by ``IF [NOT] PLATFORM <name>``.
PLATFORM_NAMES = ("windows", "linux", "macos", "bsd", "unix")


@dataclass(frozen=True)
class Platform:
    """Naming conventions and identity of a host platform.

    Attributes:
        os: One of "windows", "linux", "macos", "bsd" or "other".
        exe_suffix: Suffix for executables.
        static_lib_prefix: Prefix for static libraries.
        static_lib_suffix: Suffix for static libraries.
        shared_lib_prefix: Prefix for shared libraries.
        shared_lib_suffix: Suffix for shared libraries.
    """

    os: str
    exe_suffix: str = ""
    static_lib_prefix: str = "lib"
    static_lib_suffix: str = ".a"
    shared_lib_prefix: str = "lib"
    shared_lib_suffix: str = ".so"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def is_unix(self) -> bool:
        return self.os != "windows"

    def matches(self, name: str) -> bool:
        """Check an ``IF PLATFORM`` predicate against this platform.

        ``unix`` matches every Unix-like system. Unknown names never match;
        callers validate against PLATFORM_NAMES first.
        """
        if name == "unix":
            return self.is_unix
        return name == self.os

    def static_library_name(self, name: str) -> str:
        return f"{self.static_lib_prefix}{name}{self.static_lib_suffix}"

    def shared_library_name(self, name: str) -> str:
        return f"{self.shared_lib_prefix}{name}{self.shared_lib_suffix}"

    def executable_name(self, name: str) -> str:
        return f"{name}{self.exe_suffix}"


WINDOWS = Platform(
    os="windows",
    exe_suffix=".exe",
    static_lib_prefix="",
    static_lib_suffix=".lib",
    shared_lib_prefix="",
    shared_lib_suffix=".dll",
)


def detect_os(sys_platform: str) -> str:
    """Map a ``sys.platform`` value to a platform name."""
    if sys_platform == "win32":
        return "windows"
    if sys_platform.startswith("linux"):
        return "linux"
    if sys_platform == "darwin":
        return "macos"
    if "bsd" in sys_platform or sys_platform.startswith("dragonfly"):
        return "bsd"
    return "other"


def platform_for(os_name: str) -> Platform:
    if os_name == "windows":
        return WINDOWS
    return Platform(os=os_name)


@lru_cache(maxsize=1)
def get_platform() -> Platform:
    """Get the platform the tool is running on."""
    return platform_for(detect_os(sys.platform))
