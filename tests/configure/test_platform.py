# SPDX-License-Identifier: MIT
"""Tests for kiln.configure.platform."""

import pytest

from kiln.configure.platform import Platform, can_spawn, get_platform
from kiln.core.errors import OptionError


class TestFromTriple:
    def test_arch_os_abi(self):
        p = Platform.from_triple("x86_64-linux-gnu")
        assert p == Platform(os="linux", arch="x86_64", abi="gnu")

    def test_without_abi(self):
        p = Platform.from_triple("aarch64-macos")
        assert p.abi == ""
        assert p.triple == "aarch64-macos"

    def test_aliases(self):
        p = Platform.from_triple("arm64-darwin")
        assert p.arch == "aarch64"
        assert p.os == "macos"

    @pytest.mark.parametrize("triple", ["", "x86_64", "-linux", "x86_64-"])
    def test_invalid(self, triple):
        with pytest.raises(OptionError):
            Platform.from_triple(triple)


class TestPredicates:
    @pytest.mark.parametrize("os_tag", ["macos", "ios", "tvos", "watchos"])
    def test_darwin_family(self, os_tag):
        assert Platform(os=os_tag, arch="aarch64").is_darwin

    def test_mingw(self):
        assert Platform.from_triple("x86_64-windows-gnu").is_mingw
        assert not Platform.from_triple("x86_64-windows-msvc").is_mingw
        assert not Platform.from_triple("x86_64-linux-gnu").is_mingw

    def test_bsds(self):
        assert Platform.from_triple("x86_64-freebsd").is_freebsd
        assert Platform.from_triple("x86_64-openbsd").is_openbsd


class TestNaming:
    def test_unix_static_lib(self):
        p = Platform.from_triple("x86_64-linux-gnu")
        assert p.static_lib_filename("zigcpp") == "libzigcpp.a"
        assert p.exe_suffix == ""

    def test_msvc_static_lib(self):
        p = Platform.from_triple("x86_64-windows-msvc")
        assert p.static_lib_filename("zigcpp") == "zigcpp.lib"
        assert p.object_suffix == ".obj"
        assert p.exe_suffix == ".exe"

    def test_mingw_static_lib(self):
        p = Platform.from_triple("x86_64-windows-gnu")
        assert p.static_lib_filename("zigcpp") == "libzigcpp.a"


class TestHost:
    def test_get_platform_is_cached(self):
        assert get_platform() is get_platform()

    def test_get_platform_linux(self, monkeypatch):
        get_platform.cache_clear()
        monkeypatch.setattr("kiln.configure.platform.sys.platform", "linux")
        monkeypatch.setattr(
            "kiln.configure.platform._platform.machine", lambda: "AMD64"
        )
        try:
            p = get_platform()
            assert p.os == "linux"
            assert p.arch == "x86_64"
        finally:
            get_platform.cache_clear()

    @pytest.mark.parametrize(
        ("host_type", "abi"),
        [
            ("x86_64-pc-linux-gnu", "gnu"),
            ("x86_64-pc-linux-musl", "musl"),
            ("armv7-unknown-linux-musleabihf", "musl"),
            (None, "gnu"),
        ],
    )
    def test_get_platform_linux_libc(self, monkeypatch, host_type, abi):
        get_platform.cache_clear()
        monkeypatch.setattr("kiln.configure.platform.sys.platform", "linux")
        monkeypatch.setattr(
            "kiln.configure.platform.sysconfig.get_config_var",
            lambda name: host_type if name == "HOST_GNU_TYPE" else None,
        )
        try:
            assert get_platform().abi == abi
        finally:
            get_platform.cache_clear()

    def test_can_spawn(self, monkeypatch):
        monkeypatch.setattr("kiln.configure.platform.sys.platform", "wasi")
        assert can_spawn() is False
        monkeypatch.setattr("kiln.configure.platform.sys.platform", "linux")
        assert can_spawn() is True
