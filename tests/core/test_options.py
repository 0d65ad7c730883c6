# SPDX-License-Identifier: MIT
"""Tests for kiln.core.options."""

import pytest

from kiln.core.errors import OptionError
from kiln.core.options import (
    BUILD_OPTION_SPECS,
    TEST_OPTION_SPECS,
    BuildMode,
    BuildOptions,
    TestOptions,
    check_option_names,
    parse_bool,
)


class TestBuildMode:
    @pytest.mark.parametrize(
        "text,mode",
        [
            ("debug", BuildMode.DEBUG),
            ("release-safe", BuildMode.RELEASE_SAFE),
            ("Release_Fast", BuildMode.RELEASE_FAST),
            (" release-small ", BuildMode.RELEASE_SMALL),
        ],
    )
    def test_parse(self, text, mode):
        assert BuildMode.parse(text) is mode

    def test_parse_unknown(self):
        with pytest.raises(OptionError, match="unknown build mode"):
            BuildMode.parse("fast")


class TestParseBool:
    @pytest.mark.parametrize("text", ["1", "true", "YES", "on"])
    def test_true(self, text):
        assert parse_bool("x", text) is True

    @pytest.mark.parametrize("text", ["0", "False", "no", "off"])
    def test_false(self, text):
        assert parse_bool("x", text) is False

    def test_invalid(self):
        with pytest.raises(OptionError, match="'x'"):
            parse_bool("x", "maybe")


class TestBuildOptions:
    def test_defaults(self):
        options = BuildOptions()
        assert options.enable_llvm is False
        assert options.enable_logging is None
        assert options.mem_leak_frames is None
        assert options.tracy is None

    def test_from_vars(self):
        options = BuildOptions.from_vars(
            {
                "enable-llvm": "true",
                "stage1": "1",
                "mem-leak-frames": "8",
                "config_h": "/build/config.h",
                "use-zig-libcxx": "yes",
                "tracy": "/src/tracy",
                "log": "false",
            }
        )
        assert options.enable_llvm is True
        assert options.legacy_frontend is True
        assert options.mem_leak_frames == 8
        assert options.config_h_path == "/build/config.h"
        assert options.use_bundled_libcxx is True
        assert options.tracy == "/src/tracy"
        assert options.enable_logging is False

    def test_from_vars_ignores_test_options(self):
        options = BuildOptions.from_vars({"test-skip-libc": "true"})
        assert options == BuildOptions()

    def test_negative_int(self):
        with pytest.raises(OptionError):
            BuildOptions.from_vars({"mem-leak-frames": "-1"})

    def test_bad_int(self):
        with pytest.raises(OptionError, match="integer"):
            BuildOptions.from_vars({"mem-leak-frames": "lots"})

    def test_frozen(self):
        options = BuildOptions()
        with pytest.raises(AttributeError):
            options.enable_llvm = True  # type: ignore[misc]

    def test_to_dict_has_every_field(self):
        data = BuildOptions().to_dict()
        assert "enable_llvm" in data
        assert len(data) == len(BUILD_OPTION_SPECS)

    def test_every_spec_names_a_field(self):
        fields = set(BuildOptions().to_dict())
        assert {spec.field for spec in BUILD_OPTION_SPECS} == fields


class TestTestOptions:
    def test_from_vars(self):
        options = TestOptions.from_vars(
            {"test-filter": "align", "test-skip-stage2": "true"},
            modes=(BuildMode.RELEASE_FAST,),
        )
        assert options.test_filter == "align"
        assert options.skip_self_hosted_tests is True
        assert options.modes == (BuildMode.RELEASE_FAST,)

    def test_default_modes(self):
        assert TestOptions().modes == (BuildMode.DEBUG,)

    def test_spec_names_are_prefixed(self):
        assert all(spec.name.startswith("test-") for spec in TEST_OPTION_SPECS)


class TestCheckOptionNames:
    def test_known(self):
        check_option_names(
            {"enable-llvm": "1", "test-skip-libc": "1", "skip-release": "1"}
        )

    def test_unknown(self):
        with pytest.raises(OptionError, match="enable-lvm"):
            check_option_names({"enable-lvm": "1"})
