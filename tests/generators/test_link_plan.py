# SPDX-License-Identifier: MIT
"""Tests for kiln.generators.link_plan."""

import json

from kiln.configure.platform import Platform
from kiln.core.graph import BuildGraph
from kiln.generators import LinkPlanGenerator

HOST = Platform.from_triple("x86_64-linux-gnu")


class TestLinkPlanGenerator:
    def test_name(self):
        gen = LinkPlanGenerator()
        assert gen.name == "link_plan"
        assert "link_plan" in repr(gen)

    def test_writes_graph(self, tmp_path):
        graph = BuildGraph("zig", root_dir=tmp_path)
        exe = graph.add_executable("zig", "src/main.zig", target=HOST)
        exe.link_system_library("z").add_include_dir("/opt/llvm/include")
        graph.default_step.depend_on(exe)

        path = LinkPlanGenerator().generate(graph, tmp_path / "out")

        plan = json.loads(path.read_text())
        assert plan["root_dir"] == str(tmp_path.absolute())
        [artifact] = plan["artifacts"]
        assert artifact["target"] == "x86_64-linux-gnu"
        assert artifact["directives"]["system_libs"] == ["z"]
        assert artifact["directives"]["include_dirs"] == ["/opt/llvm/include"]
        assert plan["steps"][0]["dependencies"] == ["zig"]
