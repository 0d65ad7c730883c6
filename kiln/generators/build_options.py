# SPDX-License-Identifier: MIT
"""build_options.json generator.

Writes the options module of every artifact, keyed by artifact name:

    {
        "zig": {
            "mem_leak_frames": 4,
            "have_llvm": true,
            "version": "0.10.0-dev.2025+ecf0050a9",
            "semver": {"major": 0, "minor": 10, "patch": 0, ...},
            ...
        },
        "test": {...}
    }
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from kiln.generators.generator import BaseGenerator

if TYPE_CHECKING:
    from kiln.core.graph import BuildGraph


class BuildOptionsGenerator(BaseGenerator):
    """Generator for build_options.json.

    Example:
        BuildOptionsGenerator().generate(graph, Path("build"))
        # Creates build/build_options.json
    """

    def __init__(self) -> None:
        super().__init__("build_options", "build_options.json")

    def document(self, graph: BuildGraph) -> dict[str, Any]:
        return {module.name: module.to_dict() for module in graph.options_modules}
