# SPDX-License-Identifier: MIT
"""Linking against the embedded LLVM/Clang/LLD toolchain."""

from kiln.toolchains.embedded import (
    CxxRuntime,
    EmbeddedToolchainLinker,
    LinkReport,
    LinkStrategy,
)

__all__ = [
    "CxxRuntime",
    "EmbeddedToolchainLinker",
    "LinkReport",
    "LinkStrategy",
]
