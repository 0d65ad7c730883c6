# SPDX-License-Identifier: MIT
"""Target platform description.

A Platform names the operating system, CPU architecture and ABI an
artifact is built for. The toolchain linker keys its platform quirks
off these values, so the same description is used for the host
(get_platform()) and for cross targets (Platform.from_triple()).
"""

from __future__ import annotations

import platform as _platform
import sys
import sysconfig
from dataclasses import dataclass
from functools import lru_cache

from kiln.core.errors import OptionError

# Operating systems that share the Darwin kernel and its C++ runtime.
DARWIN_OS_TAGS: frozenset[str] = frozenset({"macos", "ios", "tvos", "watchos"})

_ARCH_ALIASES: dict[str, str] = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
    "i386": "x86",
    "i686": "x86",
}

_OS_ALIASES: dict[str, str] = {
    "darwin": "macos",
    "win32": "windows",
    "cygwin": "windows",
}


@dataclass(frozen=True)
class Platform:
    """An os/arch/abi triple with the naming conventions derived from it.

    Attributes:
        os: Operating system tag ('linux', 'freebsd', 'openbsd', 'macos',
            'windows', ...).
        arch: CPU architecture ('x86_64', 'aarch64', ...).
        abi: ABI tag ('gnu', 'musl', 'msvc', ...), or '' when unspecified.
    """

    os: str
    arch: str
    abi: str = ""

    @classmethod
    def from_triple(cls, triple: str) -> Platform:
        """Parse an 'arch-os[-abi]' target triple.

        Raises:
            OptionError: If the triple has fewer than two components.
        """
        parts = triple.split("-")
        if len(parts) < 2 or not all(parts[:2]):
            raise OptionError(f"invalid target triple: {triple!r}")
        arch = _ARCH_ALIASES.get(parts[0], parts[0])
        os_tag = _OS_ALIASES.get(parts[1], parts[1])
        abi = "-".join(parts[2:])
        return cls(os=os_tag, arch=arch, abi=abi)

    @property
    def triple(self) -> str:
        if self.abi:
            return f"{self.arch}-{self.os}-{self.abi}"
        return f"{self.arch}-{self.os}"

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    @property
    def is_freebsd(self) -> bool:
        return self.os == "freebsd"

    @property
    def is_openbsd(self) -> bool:
        return self.os == "openbsd"

    @property
    def is_darwin(self) -> bool:
        return self.os in DARWIN_OS_TAGS

    @property
    def is_macos(self) -> bool:
        return self.os == "macos"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def is_mingw(self) -> bool:
        """Windows with the GNU ABI."""
        return self.is_windows and self.abi == "gnu"

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self.is_windows else ""

    @property
    def object_suffix(self) -> str:
        return ".obj" if self.is_windows and not self.is_mingw else ".o"

    @property
    def static_lib_prefix(self) -> str:
        return "" if self.is_windows and not self.is_mingw else "lib"

    @property
    def static_lib_suffix(self) -> str:
        return ".lib" if self.is_windows and not self.is_mingw else ".a"

    def static_lib_filename(self, name: str) -> str:
        """File name of a static library called `name` on this platform."""
        return f"{self.static_lib_prefix}{name}{self.static_lib_suffix}"

    def __str__(self) -> str:
        return self.triple


@lru_cache(maxsize=1)
def get_platform() -> Platform:
    """Detect the host platform."""
    machine = _platform.machine().lower() or "unknown"
    arch = _ARCH_ALIASES.get(machine, machine)

    if sys.platform.startswith("linux"):
        os_tag = "linux"
        # The interpreter's configure triple names the C library it was
        # built against (x86_64-pc-linux-musl on Alpine).
        host_type = sysconfig.get_config_var("HOST_GNU_TYPE") or ""
        abi = "musl" if "-musl" in host_type else "gnu"
    elif sys.platform.startswith("freebsd"):
        os_tag, abi = "freebsd", ""
    elif sys.platform.startswith("openbsd"):
        os_tag, abi = "openbsd", ""
    elif sys.platform == "darwin":
        os_tag, abi = "macos", ""
    elif sys.platform in ("win32", "cygwin"):
        os_tag, abi = "windows", "msvc"
    else:
        os_tag, abi = sys.platform, ""

    return Platform(os=os_tag, arch=arch, abi=abi)


def can_spawn() -> bool:
    """Whether this interpreter can start child processes at all."""
    return sys.platform not in ("emscripten", "wasi")
