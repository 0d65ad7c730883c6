# SPDX-License-Identifier: MIT
"""Tests for kiln.generators.build_options."""

import json

from kiln.configure.version import SemanticVersion
from kiln.core.graph import BuildGraph
from kiln.generators import BuildOptionsGenerator, Generator


class TestBuildOptionsGenerator:
    def test_is_generator(self):
        gen = BuildOptionsGenerator()
        assert gen.name == "build_options"
        assert isinstance(gen, Generator)

    def test_empty_graph(self, tmp_path):
        graph = BuildGraph("zig", root_dir=tmp_path)

        path = BuildOptionsGenerator().generate(graph, tmp_path / "build")

        assert path == tmp_path / "build" / "build_options.json"
        assert json.loads(path.read_text()) == {}

    def test_modules_by_artifact(self, tmp_path):
        graph = BuildGraph("zig", root_dir=tmp_path)
        exe_module = graph.add_options("zig")
        exe_module.add_option("have_llvm", False)
        exe_module.add_option("semver", SemanticVersion(0, 10, 0))
        graph.add_options("test").add_option("skip_compile_errors", True)

        path = BuildOptionsGenerator().generate(graph, tmp_path)

        data = json.loads(path.read_text())
        assert list(data) == ["zig", "test"]
        assert data["zig"]["have_llvm"] is False
        assert data["zig"]["semver"]["minor"] == 10
        assert data["test"] == {"skip_compile_errors": True}
