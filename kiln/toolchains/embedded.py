# SPDX-License-Identifier: MIT
"""Linking the compiler against the embedded LLVM/Clang/LLD toolchain.

There are three ways the compiler can end up linked:

- NONE: the toolchain is not embedded; nothing to do.
- SYSTEM: a CMake build left a config.h describing an installed LLVM.
  The adapter library CMake built, the installed libraries and the C++
  runtime the system compiler uses are linked.
- STATIC: no config.h (or static linking forced). The interop sources
  are compiled in and the fixed library manifest is linked by name.

The linker never fails silently on the fallbacks it takes; each one is
logged and recorded in the returned LinkReport.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from kiln.configure.platform import can_spawn
from kiln.core.errors import LibraryNotFoundError, ToolchainLinkError
from kiln.toolchains.manifest import (
    ADAPTER_LIB_NAME,
    CLANG_LIBS,
    EXE_CFLAGS,
    INTEROP_SOURCES,
    LLD_LIBS,
    LLVM_LIBS,
)

if TYPE_CHECKING:
    from kiln.configure.config_h import CMakeConfig
    from kiln.core.artifact import Artifact
    from kiln.core.options import BuildOptions

logger = logging.getLogger(__name__)

SYSTEM_LIB_FLAG = "-l"

# The interop sources pull in LLVM debug-only symbols unless assertions
# are compiled out.
INTEROP_CFLAGS: tuple[str, ...] = EXE_CFLAGS + ("-DNDEBUG=1",)

WINDOWS_STATIC_LIBS: tuple[str, ...] = ("version", "uuid", "ole32")


class LinkStrategy(Enum):
    """How the embedded toolchain is linked."""

    NONE = "none"
    SYSTEM = "system"
    STATIC = "static"


class CxxRuntime(Enum):
    """Which C++ runtime the system-integrated path settled on."""

    BUNDLED = "bundled"
    STATIC_ARCHIVE = "static-archive"
    SYSTEM_SHARED = "system-shared"
    DEFAULT = "default"


@dataclass
class LinkReport:
    """Outcome of EmbeddedToolchainLinker.apply().

    Attributes:
        strategy: The linking strategy that was applied.
        cxx_runtime: C++ runtime choice (system-integrated path only).
        warnings: Fallbacks taken, one message each.
    """

    strategy: LinkStrategy
    cxx_runtime: CxxRuntime | None = None
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        logger.warning("%s", message)
        self.warnings.append(message)

    def to_dict(self) -> dict[str, object]:
        return {
            "strategy": self.strategy.value,
            "cxx_runtime": self.cxx_runtime.value if self.cxx_runtime else None,
            "warnings": list(self.warnings),
        }


def add_cmake_library_list(artifact: Artifact, libraries: str) -> None:
    """Add a CMake ';'-separated library list to an artifact.

    Entries starting with '-l' are linked as system libraries; all other
    entries are paths to archives or objects.
    """
    for entry in libraries.split(";"):
        if not entry:
            continue
        if entry.startswith(SYSTEM_LIB_FLAG):
            artifact.link_system_library(entry[len(SYSTEM_LIB_FLAG) :])
        else:
            artifact.add_object_file(entry)


def find_cxx_library(cxx_compiler: str, name: str) -> str:
    """Ask the C++ compiler where a library archive lives.

    Runs `<cxx_compiler> -print-file-name=<name>`. Compilers echo the
    name back unchanged when they cannot find the file.

    Args:
        cxx_compiler: The C++ compiler CMake used.
        name: Archive file name, e.g. 'libstdc++.a'.

    Returns:
        Path to the archive.

    Raises:
        LibraryNotFoundError: The compiler does not know the archive, or
            no process can be started to ask it.
        ToolchainLinkError: The compiler exited with an error.
    """
    if not can_spawn():
        raise LibraryNotFoundError(name, f"cannot run {cxx_compiler} to find {name}")

    cmd = [cxx_compiler, f"-print-file-name={name}"]
    logger.debug("running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise LibraryNotFoundError(
            name, f"unable to run {cxx_compiler}: {e.strerror or e}"
        ) from None
    if result.returncode != 0:
        raise ToolchainLinkError(
            f"{cxx_compiler} -print-file-name={name} failed: {result.stderr.strip()}"
        )

    lines = [line for line in result.stdout.splitlines() if line]
    if not lines or lines[0] == name:
        raise LibraryNotFoundError(name)
    return lines[0]


def add_cxx_known_path(artifact: Artifact, cxx_compiler: str, name: str) -> str:
    """Locate a C++ runtime archive and add it as an object file."""
    path = find_cxx_library(cxx_compiler, name)
    logger.debug("found %s at %s", name, path)
    artifact.add_object_file(path)
    return path


class EmbeddedToolchainLinker:
    """Applies the embedded-toolchain link directives to an artifact.

    Example:
        linker = EmbeddedToolchainLinker(options, configure.cmake_config(options))
        report = linker.apply(exe)

    Attributes:
        options: Normalized build options.
        cmake_config: Parsed config.h, or None when there is none or
            static linking is forced.
    """

    def __init__(
        self, options: BuildOptions, cmake_config: CMakeConfig | None
    ) -> None:
        self.options = options
        self.cmake_config = cmake_config

    @property
    def strategy(self) -> LinkStrategy:
        if not self.options.enable_llvm:
            return LinkStrategy.NONE
        if self.cmake_config is not None and not self.options.static_llvm:
            return LinkStrategy.SYSTEM
        return LinkStrategy.STATIC

    def apply(self, artifact: Artifact) -> LinkReport:
        """Add the directives for the chosen strategy to `artifact`.

        Raises:
            ToolchainLinkError: The system-integrated configuration is
                incomplete or a required C++ runtime archive is missing.
        """
        strategy = self.strategy
        report = LinkReport(strategy)
        logger.info("linking %s: embedded toolchain %s", artifact.name, strategy.value)

        cfg = self.cmake_config
        if strategy is LinkStrategy.STATIC:
            self._link_static(artifact)
        elif strategy is LinkStrategy.SYSTEM and cfg is not None:
            self._link_system(artifact, cfg, report)
        return report

    def _link_system(
        self, artifact: Artifact, cfg: CMakeConfig, report: LinkReport
    ) -> None:
        if not cfg.lld_include_dir:
            raise ToolchainLinkError(
                "config.h does not define ZIG_LLD_INCLUDE_PATH",
                hint="re-run CMake, or pass static-llvm=true",
            )

        if cfg.cmake_prefix_path:
            artifact.add_search_prefix(cfg.cmake_prefix_path)

        adapter = os.path.join(
            cfg.cmake_binary_dir,
            ADAPTER_LIB_NAME,
            artifact.target.static_lib_filename(ADAPTER_LIB_NAME),
        )
        artifact.add_object_file(adapter)
        artifact.add_include_dir(cfg.lld_include_dir)
        add_cmake_library_list(artifact, cfg.clang_libraries)
        add_cmake_library_list(artifact, cfg.lld_libraries)
        add_cmake_library_list(artifact, cfg.llvm_libraries)

        if self.options.use_bundled_libcxx:
            artifact.link_libcpp()
            report.cxx_runtime = CxxRuntime.BUNDLED
        else:
            report.cxx_runtime = self._link_system_cxx(artifact, cfg, report)

        if cfg.dia_guids_lib:
            artifact.add_object_file(cfg.dia_guids_lib)

    def _link_system_cxx(
        self, artifact: Artifact, cfg: CMakeConfig, report: LinkReport
    ) -> CxxRuntime:
        # The installed LLVM was built against the system C++ runtime, so
        # that is the one linked here.
        target = artifact.target
        if target.is_linux:
            # Prefer a static libstdc++; otherwise hope -lc++ works.
            try:
                add_cxx_known_path(artifact, cfg.cxx_compiler, "libstdc++.a")
                runtime = CxxRuntime.STATIC_ARCHIVE
            except LibraryNotFoundError as e:
                report.warn(f"{e.message}; falling back to linking c++ dynamically")
                artifact.link_system_library("c++")
                runtime = CxxRuntime.SYSTEM_SHARED
            artifact.link_system_library("unwind")
            return runtime
        if target.is_freebsd:
            add_cxx_known_path(artifact, cfg.cxx_compiler, "libc++.a")
            artifact.link_system_library("pthread")
            return CxxRuntime.STATIC_ARCHIVE
        if target.is_openbsd:
            add_cxx_known_path(artifact, cfg.cxx_compiler, "libc++.a")
            add_cxx_known_path(artifact, cfg.cxx_compiler, "libc++abi.a")
            return CxxRuntime.STATIC_ARCHIVE
        if target.is_darwin:
            artifact.link_system_library("c++")
            return CxxRuntime.SYSTEM_SHARED
        return CxxRuntime.DEFAULT

    def _link_static(self, artifact: Artifact) -> None:
        artifact.add_c_source_files(INTEROP_SOURCES, INTEROP_CFLAGS)

        for lib_name in CLANG_LIBS + LLD_LIBS + LLVM_LIBS:
            artifact.link_system_library(lib_name)

        artifact.link_system_library("z")
        # Relies on LLVM, Clang and LLD having been built against libc++.
        artifact.link_system_library("c++")

        if artifact.target.is_windows:
            for lib_name in WINDOWS_STATIC_LIBS:
                artifact.link_system_library(lib_name)
