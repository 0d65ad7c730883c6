# SPDX-License-Identifier: MIT
"""Build artifacts and their link directives.

An Artifact is the handle kiln attaches compile and link directives to:
include directories, object files, system libraries, C/C++ sources and
so on. kiln never runs the compiler itself; the directives are the
description a generator or an external scheduler consumes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from kiln.configure.platform import Platform
from kiln.core.options import BuildMode

logger = logging.getLogger(__name__)

ArtifactKind = Literal[
    "executable",
    "test",
    "static_library",
]


@dataclass(frozen=True)
class CSourceSet:
    """C or C++ files compiled with a shared set of flags."""

    files: tuple[str, ...]
    flags: tuple[str, ...]


@dataclass
class LinkDirectives:
    """Everything the toolchain linker and the assembler add to an artifact.

    Lists keep insertion order. include_dirs and search_prefixes hold no
    duplicates. object_files and system_libs keep every entry, since a
    static archive may be listed again to resolve back-references.
    """

    include_dirs: list[str] = field(default_factory=list)
    object_files: list[str] = field(default_factory=list)
    system_libs: list[str] = field(default_factory=list)
    c_sources: list[CSourceSet] = field(default_factory=list)
    c_macros: list[tuple[str, str | None]] = field(default_factory=list)
    search_prefixes: list[str] = field(default_factory=list)
    libraries: list[Artifact] = field(default_factory=list)
    link_libc: bool = False
    link_libcpp: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "include_dirs": list(self.include_dirs),
            "object_files": list(self.object_files),
            "system_libs": list(self.system_libs),
            "c_sources": [
                {"files": list(s.files), "flags": list(s.flags)}
                for s in self.c_sources
            ],
            "c_macros": [
                {"name": name, "value": value} for name, value in self.c_macros
            ],
            "search_prefixes": list(self.search_prefixes),
            "libraries": [lib.name for lib in self.libraries],
            "link_libc": self.link_libc,
            "link_libcpp": self.link_libcpp,
        }


class Artifact:
    """A compiled output (executable, test binary or static library).

    Example:
        exe = Artifact("zig", "executable", root_source="src/main.zig",
                       target=get_platform(), mode=BuildMode.DEBUG)
        exe.add_include_dir("src")
        exe.link_system_library("z")

    Attributes:
        name: Artifact name.
        kind: What is produced.
        root_source: Root source file, or None for pure C libraries.
        target: Platform the artifact is built for.
        mode: Optimization mode.
        strip: Omit debug information.
        single_threaded: Build for single-threaded execution (None = default).
        want_lto: Whether link-time optimization is allowed (None = default).
        packages: Named package paths made importable to the root source.
        directives: Compile and link directives.
    """

    __slots__ = (
        "name",
        "kind",
        "root_source",
        "target",
        "mode",
        "strip",
        "single_threaded",
        "want_lto",
        "packages",
        "directives",
    )

    def __init__(
        self,
        name: str,
        kind: ArtifactKind,
        *,
        root_source: str | None = None,
        target: Platform,
        mode: BuildMode = BuildMode.DEBUG,
        strip: bool = False,
        single_threaded: bool | None = None,
    ) -> None:
        self.name = name
        self.kind: ArtifactKind = kind
        self.root_source = root_source
        self.target = target
        self.mode = mode
        self.strip = strip
        self.single_threaded = single_threaded
        self.want_lto: bool | None = None
        self.packages: dict[str, str] = {}
        self.directives = LinkDirectives()

    def add_include_dir(self, path: str | Path) -> Artifact:
        _append_unique(self.directives.include_dirs, str(path))
        return self

    def add_object_file(self, path: str | Path) -> Artifact:
        self.directives.object_files.append(str(path))
        return self

    def link_system_library(self, name: str) -> Artifact:
        self.directives.system_libs.append(name)
        return self

    def add_c_source_files(
        self,
        files: list[str] | tuple[str, ...],
        flags: list[str] | tuple[str, ...],
    ) -> Artifact:
        self.directives.c_sources.append(CSourceSet(tuple(files), tuple(flags)))
        return self

    def add_c_source_file(
        self, file: str | Path, flags: list[str] | tuple[str, ...]
    ) -> Artifact:
        return self.add_c_source_files([str(file)], flags)

    def define_c_macro(self, name: str, value: str | None = None) -> Artifact:
        self.directives.c_macros.append((name, value))
        return self

    def add_search_prefix(self, prefix: str | Path) -> Artifact:
        """Add a prefix whose lib/ and include/ directories are searched."""
        _append_unique(self.directives.search_prefixes, str(prefix))
        return self

    def link_library(self, library: Artifact) -> Artifact:
        """Link another artifact built by this graph (a static library)."""
        if library not in self.directives.libraries:
            self.directives.libraries.append(library)
        return self

    def link_libc(self) -> Artifact:
        self.directives.link_libc = True
        return self

    def link_libcpp(self) -> Artifact:
        """Link the bundled C++ standard library."""
        self.directives.link_libcpp = True
        return self

    def add_package_path(self, name: str, path: str) -> Artifact:
        self.packages[name] = path
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "root_source": self.root_source,
            "target": self.target.triple,
            "mode": self.mode.value,
            "strip": self.strip,
            "single_threaded": self.single_threaded,
            "want_lto": self.want_lto,
            "packages": dict(self.packages),
            "directives": self.directives.to_dict(),
        }

    def __repr__(self) -> str:
        return f"Artifact({self.name!r}, {self.kind}, target={self.target.triple})"


def _append_unique(items: list[str], value: str) -> None:
    """Append, preserving order and dropping repeats."""
    if value in items:
        logger.debug("skipping duplicate directive %s", value)
        return
    items.append(value)
