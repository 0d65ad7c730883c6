# SPDX-License-Identifier: MIT
"""
kiln: build-configuration resolver and toolchain linker for the compiler.

kiln turns the compiler's build options into a consistent configuration,
resolves the version from git, decides how the embedded LLVM toolchain
is linked and writes the resulting build description.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Re-export commonly used classes for convenient imports
from kiln.configure.config import Configure  # noqa: E402
from kiln.core.graph import BuildGraph  # noqa: E402
from kiln.core.options import BuildMode, BuildOptions, TestOptions  # noqa: E402
from kiln.project import build, link  # noqa: E402

__all__ = [
    "BuildGraph",
    "BuildMode",
    "BuildOptions",
    "Configure",
    "TestOptions",
    "__version__",
    "build",
    "link",
]
