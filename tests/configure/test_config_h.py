# SPDX-License-Identifier: MIT
"""Tests for kiln.configure.config_h."""

from __future__ import annotations

from pathlib import Path

import pytest

from kiln.configure.config_h import (
    CONFIG_H_NAME,
    MAX_CONFIG_H_BYTES,
    CMakeConfig,
    find_and_parse_config_h,
    find_config_h,
    parse_config_h,
    read_config_h,
    to_native_path_sep,
)
from kiln.core.errors import ConfigHeaderError

FULL_CONFIG_H = """\
// This file is generated by CMake.
#ifndef ZIG_CONFIG_H
#define ZIG_CONFIG_H

#define ZIG_VERSION_STRING "0.10.0"

#define ZIG_CMAKE_BINARY_DIR "/home/me/zig/build"
#define ZIG_CMAKE_PREFIX_PATH "/opt/llvm"
#define ZIG_CXX_COMPILER "/usr/bin/c++"
#define ZIG_LLD_INCLUDE_PATH "/opt/llvm/include"
#define ZIG_LLD_LIBRARIES "/opt/llvm/lib/liblldELF.a;/opt/llvm/lib/liblldCommon.a"
#define ZIG_CLANG_LIBRARIES "/opt/llvm/lib/libclangBasic.a"
#define ZIG_LLVM_LIBRARIES "-lLLVM-15;-lz"
#define ZIG_DIA_GUIDS_LIB ""

#endif
"""


class TestToNativePathSep:
    def test_posix_unchanged(self):
        assert to_native_path_sep("/a/b/c", "/") == "/a/b/c"

    def test_windows(self):
        assert to_native_path_sep("C:/llvm/lib", "\\") == "C:\\llvm\\lib"


class TestParseConfigH:
    def test_all_fields(self):
        cfg = parse_config_h(FULL_CONFIG_H, sep="/")

        assert cfg == CMakeConfig(
            cmake_binary_dir="/home/me/zig/build",
            cmake_prefix_path="/opt/llvm",
            cxx_compiler="/usr/bin/c++",
            lld_include_dir="/opt/llvm/include",
            lld_libraries="/opt/llvm/lib/liblldELF.a;/opt/llvm/lib/liblldCommon.a",
            clang_libraries="/opt/llvm/lib/libclangBasic.a",
            llvm_libraries="-lLLVM-15;-lz",
            dia_guids_lib="",
        )

    def test_native_separator(self):
        cfg = parse_config_h(FULL_CONFIG_H, sep="\\")

        assert cfg.cmake_binary_dir == "\\home\\me\\zig\\build"
        assert cfg.lld_include_dir == "\\opt\\llvm\\include"
        assert "/" not in "".join(cfg.to_dict().values())

    def test_reparse_is_stable(self):
        first = parse_config_h(FULL_CONFIG_H, sep="\\")
        lines = [
            f'#define ZIG_LLD_INCLUDE_PATH "{first.lld_include_dir}"',
            f'#define ZIG_CMAKE_BINARY_DIR "{first.cmake_binary_dir}"',
        ]
        second = parse_config_h("\n".join(lines), sep="\\")

        assert second.lld_include_dir == first.lld_include_dir
        assert second.cmake_binary_dir == first.cmake_binary_dir

    def test_missing_fields_default_to_empty(self):
        cfg = parse_config_h('#define ZIG_CXX_COMPILER "/usr/bin/c++"\n', sep="/")

        assert cfg.cxx_compiler == "/usr/bin/c++"
        assert cfg.lld_include_dir == ""
        assert cfg.cmake_binary_dir == ""

    def test_crlf_line_endings(self):
        text = FULL_CONFIG_H.replace("\n", "\r\n")
        assert parse_config_h(text, sep="/") == parse_config_h(FULL_CONFIG_H, sep="/")

    def test_only_cr_and_lf_split_lines(self):
        text = (
            '#define ZIG_CXX_COMPILER "/opt/c\u2028c\x85++"\r'
            '#define ZIG_DIA_GUIDS_LIB "a\x0bb\x0cc"\n'
        )
        cfg = parse_config_h(text, sep="/")
        assert cfg.cxx_compiler == "/opt/c\u2028c\x85++"
        assert cfg.dia_guids_lib == "a\x0bb\x0cc"

    def test_line_numbers_count_blank_lines(self):
        with pytest.raises(ConfigHeaderError, match="line 4"):
            parse_config_h("a\r\n\r\n\n#define ZIG_CXX_COMPILER x\n", sep="/")

    def test_unrecognized_lines_ignored(self):
        text = (
            "#define ZIG_VERSION_STRING \"0.10.0\"\n"
            "#define ZIG_LLVM_LIBRARIES_EXTRA \"nope\"\n"
            "#define OTHER_THING \"x\"\n"
            "garbage without quotes\n"
        )
        assert parse_config_h(text, sep="/") == CMakeConfig()

    def test_prefix_needs_trailing_space(self):
        # ZIG_CXX_COMPILERX is a different macro.
        cfg = parse_config_h('#define ZIG_CXX_COMPILERX "/x"\n', sep="/")
        assert cfg.cxx_compiler == ""

    def test_value_is_between_first_two_quotes(self):
        cfg = parse_config_h(
            '#define ZIG_LLVM_LIBRARIES "-lLLVM" // "comment"\n', sep="/"
        )
        assert cfg.llvm_libraries == "-lLLVM"

    def test_missing_quoted_value(self):
        text = "\n#define ZIG_CXX_COMPILER /usr/bin/c++\n"
        with pytest.raises(ConfigHeaderError, match="line 2"):
            parse_config_h(text, sep="/")

    def test_unterminated_quote(self):
        with pytest.raises(ConfigHeaderError):
            parse_config_h('#define ZIG_CXX_COMPILER "/usr/bin/c++\n', sep="/")


class TestReadConfigH:
    def test_reads_text(self, tmp_path):
        path = tmp_path / CONFIG_H_NAME
        path.write_text(FULL_CONFIG_H)
        assert read_config_h(path) == FULL_CONFIG_H

    def test_at_limit(self, tmp_path):
        path = tmp_path / CONFIG_H_NAME
        path.write_bytes(b"/" * MAX_CONFIG_H_BYTES)
        assert len(read_config_h(path)) == MAX_CONFIG_H_BYTES

    def test_too_large(self, tmp_path):
        path = tmp_path / CONFIG_H_NAME
        path.write_bytes(b"/" * (MAX_CONFIG_H_BYTES + 1))

        with pytest.raises(ConfigHeaderError) as exc_info:
            read_config_h(path)
        assert exc_info.value.path == str(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / CONFIG_H_NAME
        path.write_bytes(b"#define ZIG_CXX_COMPILER \"\xff\xfe\"\n")

        with pytest.raises(ConfigHeaderError):
            read_config_h(path)


class TestFindConfigH:
    def test_in_start_dir(self, tmp_path):
        (tmp_path / CONFIG_H_NAME).write_text("")
        assert find_config_h(tmp_path) == tmp_path.absolute() / CONFIG_H_NAME

    def test_in_ancestor(self, tmp_path):
        (tmp_path / CONFIG_H_NAME).write_text("")
        start = tmp_path / "stage3" / "bin"
        start.mkdir(parents=True)

        assert find_config_h(start) == tmp_path.absolute() / CONFIG_H_NAME

    def test_nearest_wins(self, tmp_path):
        (tmp_path / CONFIG_H_NAME).write_text("")
        inner = tmp_path / "build"
        inner.mkdir()
        (inner / CONFIG_H_NAME).write_text("")

        assert find_config_h(inner) == inner.absolute() / CONFIG_H_NAME

    def test_directory_named_config_h_skipped(self, tmp_path):
        start = tmp_path / "a"
        (start / CONFIG_H_NAME).mkdir(parents=True)
        (tmp_path / CONFIG_H_NAME).write_text("")

        assert find_config_h(start) == tmp_path.absolute() / CONFIG_H_NAME


class TestFindAndParseConfigH:
    def test_explicit_path(self, tmp_path):
        path = tmp_path / "elsewhere.h"
        path.write_text(FULL_CONFIG_H)

        result = find_and_parse_config_h(path, tmp_path / "unused")

        assert result is not None
        cfg, found = result
        assert found == path
        assert cfg.cxx_compiler.endswith("c++")

    def test_explicit_path_missing(self, tmp_path):
        with pytest.raises(ConfigHeaderError, match="unable to read"):
            find_and_parse_config_h(tmp_path / "missing.h", tmp_path)

    def test_search(self, tmp_path):
        (tmp_path / CONFIG_H_NAME).write_text(FULL_CONFIG_H)
        bin_dir = tmp_path / "stage3" / "bin"
        bin_dir.mkdir(parents=True)

        result = find_and_parse_config_h(None, bin_dir)

        assert result is not None
        assert result[1] == tmp_path.absolute() / CONFIG_H_NAME

    def test_not_found_is_not_an_error(self, tmp_path, monkeypatch):
        monkeypatch.setattr("kiln.configure.config_h.find_config_h", lambda d: None)
        assert find_and_parse_config_h(None, tmp_path) is None

    def test_parse_error_names_file(self, tmp_path):
        path = tmp_path / CONFIG_H_NAME
        path.write_text("#define ZIG_CXX_COMPILER unquoted\n")

        with pytest.raises(ConfigHeaderError) as exc_info:
            find_and_parse_config_h(path, tmp_path)

        assert exc_info.value.path == str(path)
        assert str(path) in str(exc_info.value)

    def test_accepts_str_paths(self, tmp_path: Path):
        path = tmp_path / CONFIG_H_NAME
        path.write_text(FULL_CONFIG_H)

        result = find_and_parse_config_h(str(path), str(tmp_path))
        assert result is not None
