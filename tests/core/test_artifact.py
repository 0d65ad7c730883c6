# SPDX-License-Identifier: MIT
"""Tests for kiln.core.artifact."""

from pathlib import Path

from kiln.configure.platform import Platform
from kiln.core.artifact import Artifact, CSourceSet
from kiln.core.options import BuildMode

LINUX = Platform.from_triple("x86_64-linux-gnu")


def make_artifact(name="zig", kind="executable"):
    return Artifact(name, kind, root_source="src/main.zig", target=LINUX)


class TestArtifact:
    def test_defaults(self):
        exe = make_artifact()
        assert exe.mode is BuildMode.DEBUG
        assert exe.strip is False
        assert exe.single_threaded is None
        assert exe.want_lto is None
        assert exe.packages == {}
        assert exe.directives.system_libs == []

    def test_fluent(self):
        exe = make_artifact()
        assert exe.add_include_dir("src").link_system_library("z") is exe

    def test_system_libs_keep_repeats(self):
        exe = make_artifact()
        for name in ("clangSema", "clangAST", "clangSema"):
            exe.link_system_library(name)
        assert exe.directives.system_libs == ["clangSema", "clangAST", "clangSema"]

    def test_include_dirs_deduplicated_objects_not(self):
        exe = make_artifact()
        exe.add_include_dir(Path("src")).add_include_dir("src")
        exe.add_object_file("a.a").add_object_file("b.a").add_object_file("a.a")
        assert exe.directives.include_dirs == ["src"]
        assert exe.directives.object_files == ["a.a", "b.a", "a.a"]

    def test_c_sources(self):
        exe = make_artifact()
        exe.add_c_source_files(["a.c", "b.c"], ["-O3"])
        exe.add_c_source_file("c.cpp", ("-std=c++14",))
        assert exe.directives.c_sources == [
            CSourceSet(("a.c", "b.c"), ("-O3",)),
            CSourceSet(("c.cpp",), ("-std=c++14",)),
        ]

    def test_macros(self):
        exe = make_artifact()
        exe.define_c_macro("ZIG_LINK_MODE", "Static").define_c_macro("NDEBUG")
        assert exe.directives.c_macros == [
            ("ZIG_LINK_MODE", "Static"),
            ("NDEBUG", None),
        ]

    def test_link_library_once(self):
        exe = make_artifact()
        lib = make_artifact("softfloat", "static_library")
        exe.link_library(lib).link_library(lib)
        assert exe.directives.libraries == [lib]

    def test_runtime_flags(self):
        exe = make_artifact()
        exe.link_libc()
        assert exe.directives.link_libc is True
        assert exe.directives.link_libcpp is False
        exe.link_libcpp()
        assert exe.directives.link_libcpp is True

    def test_to_dict(self):
        exe = make_artifact()
        exe.add_package_path("compiler_rt", "src/empty.zig")
        exe.link_library(make_artifact("softfloat", "static_library"))
        exe.add_search_prefix("/opt/llvm")

        data = exe.to_dict()

        assert data["target"] == "x86_64-linux-gnu"
        assert data["mode"] == "debug"
        assert data["packages"] == {"compiler_rt": "src/empty.zig"}
        assert data["directives"]["libraries"] == ["softfloat"]
        assert data["directives"]["search_prefixes"] == ["/opt/llvm"]

    def test_repr(self):
        assert "x86_64-linux-gnu" in repr(make_artifact())
