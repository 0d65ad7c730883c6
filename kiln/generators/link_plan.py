# SPDX-License-Identifier: MIT
"""link_plan.json generator.

The link plan is the whole build description: every artifact with its
sources, include directories, libraries and flags, and every named step
with what it depends on. A task runner turns it into compile and link
commands.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from kiln.generators.generator import BaseGenerator

if TYPE_CHECKING:
    from kiln.core.graph import BuildGraph


class LinkPlanGenerator(BaseGenerator):
    """Generator for link_plan.json.

    Format:
        {
            "name": "zig",
            "root_dir": "/path/to/zig",
            "artifacts": [{"name": "zig", "kind": "executable", ...}],
            "steps": [{"name": "test", "dependencies": ["test-toolchain"]}]
        }
    """

    def __init__(self) -> None:
        super().__init__("link_plan", "link_plan.json")

    def document(self, graph: BuildGraph) -> dict[str, Any]:
        plan = graph.to_dict()
        plan["root_dir"] = str(graph.root_dir.absolute())
        return plan
