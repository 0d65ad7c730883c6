# SPDX-License-Identifier: MIT
"""Tests for kiln.configure.config."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from kiln.configure.config import Configure, load_config
from kiln.core.errors import VersionUnavailableError
from kiln.core.options import BuildOptions

CONFIG_H = """\
#define ZIG_CMAKE_BINARY_DIR "/build"
#define ZIG_CXX_COMPILER "/usr/bin/c++"
#define ZIG_LLD_INCLUDE_PATH "/usr/include"
"""


class TestConfigureCache:
    def test_set_get(self, tmp_path):
        config = Configure(build_dir=tmp_path)
        config.set("key", "value")
        assert config.get("key") == "value"
        assert config.get("missing", 42) == 42

    def test_save_and_reload(self, tmp_path):
        config = Configure(build_dir=tmp_path)
        config.set("version", "0.10.0")
        config.save()

        reloaded = Configure(build_dir=tmp_path)
        assert reloaded.get("version") == "0.10.0"
        assert load_config(tmp_path / "kiln_config.json")["version"] == "0.10.0"

    def test_corrupt_cache_ignored(self, tmp_path):
        (tmp_path / "kiln_config.json").write_text("{not json")
        config = Configure(build_dir=tmp_path)
        assert config.get("version") is None

    def test_load_config_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")


class TestConfigureVersion:
    def test_override_recorded(self, tmp_path):
        config = Configure(build_dir=tmp_path)
        info = config.resolve_version("1.2.3-custom")
        assert info.version == "1.2.3-custom"
        assert config.get("version") == "1.2.3-custom"

    @patch("kiln.configure.version.subprocess.run")
    def test_git_queried_in_root(self, mock_run, tmp_path):
        mock_run.return_value.returncode = 0
        mock_run.return_value.stdout = "0.10.0\n"

        config = Configure(build_dir=tmp_path / "build", root_dir=tmp_path)
        assert config.resolve_version().version == "0.10.0"
        assert mock_run.call_args[0][0][2] == str(tmp_path)

    @patch("kiln.configure.version.subprocess.run")
    def test_unavailable(self, mock_run, tmp_path):
        mock_run.side_effect = FileNotFoundError()
        config = Configure(build_dir=tmp_path)
        with pytest.raises(VersionUnavailableError):
            config.resolve_version()


class TestConfigureCMakeConfig:
    def test_static_llvm_skips_search(self, tmp_path):
        (tmp_path / "config.h").write_text(CONFIG_H)
        config = Configure(build_dir=tmp_path)

        options = BuildOptions(enable_llvm=True, static_llvm=True)
        assert config.cmake_config(options) is None
        assert config.get("config_h") is None

    def test_found_next_to_compiler(self, tmp_path):
        (tmp_path / "config.h").write_text(CONFIG_H)
        bin_dir = tmp_path / "stage3" / "bin"
        bin_dir.mkdir(parents=True)
        config = Configure(
            build_dir=tmp_path / "out", compiler_exe=bin_dir / "zig"
        )

        cfg = config.cmake_config(BuildOptions(enable_llvm=True))

        assert cfg is not None
        assert cfg.cxx_compiler.endswith("c++")
        assert config.get("config_h") == str(tmp_path.absolute() / "config.h")

    def test_searches_build_dir_without_compiler(self, tmp_path):
        build_dir = tmp_path / "build"
        build_dir.mkdir()
        (build_dir / "config.h").write_text(CONFIG_H)

        config = Configure(build_dir=build_dir)
        assert config.cmake_config(BuildOptions(enable_llvm=True)) is not None

    def test_explicit_path(self, tmp_path):
        header = tmp_path / "my_config.h"
        header.write_text(CONFIG_H)
        config = Configure(build_dir=tmp_path / "build")

        options = BuildOptions(enable_llvm=True, config_h_path=str(header))
        assert config.cmake_config(options) is not None
        assert config.get("config_h") == str(header)

    def test_not_found(self, tmp_path, monkeypatch):
        monkeypatch.setattr(
            "kiln.configure.config_h.find_config_h", lambda start_dir: None
        )
        config = Configure(build_dir=tmp_path)

        assert config.cmake_config(BuildOptions(enable_llvm=True)) is None
        assert config.get("config_h") is None

    def test_saved_cache_is_json(self, tmp_path):
        config = Configure(build_dir=tmp_path)
        config.cmake_config(BuildOptions(enable_llvm=True, static_llvm=True))
        config.save()

        data = json.loads((tmp_path / "kiln_config.json").read_text())
        assert data == {"config_h": None}
