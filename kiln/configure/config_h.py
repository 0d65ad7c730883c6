# SPDX-License-Identifier: MIT
"""Locate and parse the CMake-generated config.h.

When the compiler is bootstrapped through CMake against a system LLVM,
CMake writes a config.h describing that installation:

    #define ZIG_CMAKE_BINARY_DIR "/home/me/zig/build"
    #define ZIG_CXX_COMPILER "/usr/bin/c++"
    #define ZIG_LLVM_LIBRARIES "-lLLVM-15;-lz"
    ...

kiln reads eight of those defines into a CMakeConfig. Not finding a
config.h is not an error: the caller falls back to static linking.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, fields
from pathlib import Path

from kiln.core.errors import ConfigHeaderError

logger = logging.getLogger(__name__)

CONFIG_H_NAME = "config.h"
MAX_CONFIG_H_BYTES = 1 * 1024 * 1024
DEFINE_PREFIX = "#define ZIG_"


@dataclass(frozen=True)
class CMakeConfig:
    """Facts about the CMake build and its LLVM installation.

    Defines missing from the header are left as empty strings.
    """

    cmake_binary_dir: str = ""
    cmake_prefix_path: str = ""
    cxx_compiler: str = ""
    lld_include_dir: str = ""
    lld_libraries: str = ""
    clang_libraries: str = ""
    llvm_libraries: str = ""
    dia_guids_lib: str = ""

    def to_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# Macro name (after DEFINE_PREFIX) -> CMakeConfig field.
DEFINE_MAPPINGS: tuple[tuple[str, str], ...] = (
    ("CMAKE_BINARY_DIR", "cmake_binary_dir"),
    ("CMAKE_PREFIX_PATH", "cmake_prefix_path"),
    ("CXX_COMPILER", "cxx_compiler"),
    ("LLD_INCLUDE_PATH", "lld_include_dir"),
    ("LLD_LIBRARIES", "lld_libraries"),
    ("CLANG_LIBRARIES", "clang_libraries"),
    ("LLVM_LIBRARIES", "llvm_libraries"),
    ("DIA_GUIDS_LIB", "dia_guids_lib"),
)

# Only CR and LF end a line.
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def to_native_path_sep(text: str, sep: str | None = None) -> str:
    """Replace forward slashes with the host path separator."""
    sep = sep or os.sep
    if sep == "/":
        return text
    return text.replace("/", sep)


def parse_config_h(text: str, *, sep: str | None = None) -> CMakeConfig:
    """Parse the text of a config.h.

    Args:
        text: Contents of the header.
        sep: Path separator to convert '/' to (default: os.sep).

    Returns:
        The parsed configuration.

    Raises:
        ConfigHeaderError: A recognized define has no quoted value.
    """
    prefixes = [
        (f"{DEFINE_PREFIX}{macro} ", field_name)
        for macro, field_name in DEFINE_MAPPINGS
    ]
    values: dict[str, str] = {}

    for lineno, line in enumerate(_LINE_BREAK_RE.split(text), start=1):
        if not line:
            continue
        for prefix, field_name in prefixes:
            if not line.startswith(prefix):
                continue
            parts = line.split('"')
            if len(parts) < 3:
                macro = prefix[len("#define ") :].strip()
                raise ConfigHeaderError(
                    f"line {lineno}: expected a quoted value for {macro}"
                )
            values[field_name] = to_native_path_sep(parts[1], sep)

    return CMakeConfig(**values)


def read_config_h(path: Path | str) -> str:
    """Read a config.h, refusing anything over MAX_CONFIG_H_BYTES.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigHeaderError: If the file is too large or cannot be decoded.
    """
    path = Path(path)
    with open(path, "rb") as f:
        data = f.read(MAX_CONFIG_H_BYTES + 1)
    if len(data) > MAX_CONFIG_H_BYTES:
        raise ConfigHeaderError(
            f"file is larger than {MAX_CONFIG_H_BYTES} bytes", path=str(path)
        )
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ConfigHeaderError(f"not valid UTF-8: {e}", path=str(path)) from None


def find_config_h(start_dir: Path | str) -> Path | None:
    """Search for config.h in `start_dir` and each of its ancestors.

    Returns:
        Path of the first config.h found, or None once the filesystem
        root has been checked.
    """
    check_dir = Path(start_dir).absolute()
    while True:
        candidate = check_dir / CONFIG_H_NAME
        if candidate.is_file():
            return candidate
        parent = check_dir.parent
        if parent == check_dir:
            return None
        check_dir = parent


def find_and_parse_config_h(
    config_h_path: Path | str | None,
    search_dir: Path | str,
) -> tuple[CMakeConfig, Path] | None:
    """Find config.h and parse it.

    Args:
        config_h_path: Explicit path to the header, or None to search
            upward from `search_dir`.
        search_dir: Directory the upward search starts in.

    Returns:
        The parsed config and the header's path, or None when no
        header was found by searching.

    Raises:
        ConfigHeaderError: The explicit header cannot be read, or a
            header is too large or malformed.
    """
    if config_h_path is not None:
        path = Path(config_h_path)
        try:
            text = read_config_h(path)
        except OSError as e:
            raise ConfigHeaderError(
                f"unable to read config.h: {e.strerror or e}", path=str(path)
            ) from None
    else:
        found = find_config_h(search_dir)
        if found is None:
            logger.info("no %s in %s or its parents", CONFIG_H_NAME, search_dir)
            return None
        path = found
        text = read_config_h(path)

    logger.debug("parsing %s", path)
    try:
        return parse_config_h(text), path
    except ConfigHeaderError as e:
        raise ConfigHeaderError(e.message, path=str(path)) from None
