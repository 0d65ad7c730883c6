# SPDX-License-Identifier: MIT
"""Build options for the compiler build.

BuildOptions is the configuration record the rest of kiln works from.
It is built once per invocation from the option surface (NAME=value
pairs, usually from the command line), normalized once, and then only
read. TestOptions carries the settings that only matter for test
targets.

Every option is declared in BUILD_OPTION_SPECS / TEST_OPTION_SPECS with
its command-line name and help text, so the CLI can list and parse
them without knowing the individual fields.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import TYPE_CHECKING, Any

from kiln.core.errors import OptionError

if TYPE_CHECKING:
    from collections.abc import Mapping


class BuildMode(Enum):
    """Optimization mode of an artifact."""

    DEBUG = "debug"
    RELEASE_SAFE = "release-safe"
    RELEASE_FAST = "release-fast"
    RELEASE_SMALL = "release-small"

    @classmethod
    def parse(cls, text: str) -> BuildMode:
        normalized = text.strip().lower().replace("_", "-")
        for mode in cls:
            if mode.value == normalized:
                return mode
        choices = ", ".join(m.value for m in cls)
        raise OptionError(f"unknown build mode {text!r} (expected one of: {choices})")


@dataclass(frozen=True)
class OptionSpec:
    """Declaration of one user-settable option.

    Attributes:
        name: Name on the command line (e.g. 'enable-llvm').
        field: Attribute name on the options dataclass.
        kind: Value type: bool, int or str.
        help: One-line description.
    """

    name: str
    field: str
    kind: type
    help: str


@dataclass(frozen=True)
class BuildOptions:
    """User-facing configuration of a compiler build.

    Fields typed `X | None` are "unset" when None; the normalizer fills
    in mem_leak_frames and enable_logging from the artifact's mode.
    """

    version_string: str | None = None

    # Enable/disable build components
    skip_non_native: bool = False
    legacy_frontend: bool = False
    omit_self_hosted: bool = False
    enable_logging: bool | None = None
    enable_link_snapshots: bool = False

    # Use system-installed libraries, or not
    use_bundled_libcxx: bool = False
    link_libc: bool = False
    link_libcxx: bool = False
    static_llvm: bool = False
    config_h_path: str | None = None

    # Embedded toolchain
    enable_llvm: bool = False
    llvm_has_m68k: bool = False
    llvm_has_csky: bool = False
    llvm_has_ve: bool = False
    llvm_has_arc: bool = False

    # Debug, traceback and performance tracing
    tracy: str | None = None
    tracy_callstack: bool = False
    tracy_allocation: bool = False
    mem_leak_frames: int | None = None
    force_gpa: bool = False

    @classmethod
    def from_vars(cls, variables: Mapping[str, str]) -> BuildOptions:
        """Build options from NAME=value strings.

        Raises:
            OptionError: On an unknown name or an unparsable value.
        """
        return cls(**_parse_specs(variables, BUILD_OPTION_SPECS))

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class TestOptions:
    """Options that only affect test targets."""

    __test__ = False  # not a pytest test class

    test_filter: str | None = None
    modes: tuple[BuildMode, ...] = (BuildMode.DEBUG,)

    skip_non_native: bool = False
    skip_self_hosted_tests: bool = False
    skip_compile_errors: bool = False
    skip_run_translated_c: bool = False
    skip_libc: bool = False

    enable_macos_sdk: bool = False

    @classmethod
    def from_vars(
        cls,
        variables: Mapping[str, str],
        modes: tuple[BuildMode, ...] = (BuildMode.DEBUG,),
    ) -> TestOptions:
        return cls(modes=modes, **_parse_specs(variables, TEST_OPTION_SPECS))


BUILD_OPTION_SPECS: tuple[OptionSpec, ...] = (
    OptionSpec("version-string", "version_string", str,
               "Override the version string. Default is to find out with git."),
    OptionSpec("skip-non-native", "skip_non_native", bool,
               "Skip non-native components during build"),
    OptionSpec("stage1", "legacy_frontend", bool,
               "Build the legacy C++ front-end, put the self-hosted compiler "
               "behind a feature flag"),
    OptionSpec("omit-stage2", "omit_self_hosted", bool,
               "Do not include the self-hosted compiler behind a feature flag "
               "inside the legacy front-end"),
    OptionSpec("enable-llvm", "enable_llvm", bool,
               "Build the compiler with the LLVM backend enabled"),
    OptionSpec("log", "enable_logging", bool,
               "Enable debug logging with --debug-log"),
    OptionSpec("link-snapshot", "enable_link_snapshots", bool,
               "Whether to enable linker state snapshots"),
    OptionSpec("llvm-has-m68k", "llvm_has_m68k", bool,
               "Whether LLVM has the experimental target m68k enabled"),
    OptionSpec("llvm-has-csky", "llvm_has_csky", bool,
               "Whether LLVM has the experimental target csky enabled"),
    OptionSpec("llvm-has-ve", "llvm_has_ve", bool,
               "Whether LLVM has the experimental target ve enabled"),
    OptionSpec("llvm-has-arc", "llvm_has_arc", bool,
               "Whether LLVM has the experimental target arc enabled"),
    OptionSpec("use-zig-libcxx", "use_bundled_libcxx", bool,
               "If libc++ is needed, use the bundled version, "
               "don't try to integrate with the system"),
    OptionSpec("force-link-libc", "link_libc", bool,
               "Force the compiler to link libc"),
    OptionSpec("force-link-libcxx", "link_libcxx", bool,
               "Force the compiler to link libc++"),
    OptionSpec("static-llvm", "static_llvm", bool,
               "Disable integration with system-installed "
               "LLVM, Clang, LLD, and libc++"),
    OptionSpec("config_h", "config_h_path", str,
               "Path to the generated config.h"),
    OptionSpec("tracy", "tracy", str,
               "Enable Tracy integration. Supply path to Tracy source"),
    OptionSpec("tracy-callstack", "tracy_callstack", bool,
               "Include callstack information with Tracy data. "
               "Does nothing if tracy is not provided"),
    OptionSpec("tracy-allocation", "tracy_allocation", bool,
               "Include allocation information with Tracy data. "
               "Does nothing if tracy is not provided"),
    OptionSpec("mem-leak-frames", "mem_leak_frames", int,
               "How many stack frames to print when a memory leak occurs. "
               "Tests get 2x this amount."),
    OptionSpec("force-gpa", "force_gpa", bool,
               "Force the compiler to use GeneralPurposeAllocator"),
)

TEST_OPTION_SPECS: tuple[OptionSpec, ...] = (
    OptionSpec("test-filter", "test_filter", str,
               "Skip tests that do not match filter"),
    OptionSpec("test-skip-non-native", "skip_non_native", bool,
               "Main test suite skips non-native builds"),
    OptionSpec("test-skip-stage2", "skip_self_hosted_tests", bool,
               "Main test suite skips self-hosted compiler tests"),
    OptionSpec("test-skip-compile-errors", "skip_compile_errors", bool,
               "Main test suite skips compile error tests"),
    OptionSpec("test-skip-run-translated-c", "skip_run_translated_c", bool,
               "Main test suite skips run-translated-c tests"),
    OptionSpec("test-skip-libc", "skip_libc", bool,
               "Main test suite skips tests that link libc"),
    OptionSpec("test-enable-macos-sdk", "enable_macos_sdk", bool,
               "Run tests requiring presence of macOS SDK and frameworks"),
)

# Options read by get_test_modes(); listed so the CLI can accept them.
TEST_MODE_OPTION_SPECS: tuple[OptionSpec, ...] = (
    OptionSpec("skip-debug", "skip_debug", bool,
               "Main test suite skips debug builds"),
    OptionSpec("skip-release", "skip_release", bool,
               "Main test suite skips release builds"),
    OptionSpec("skip-release-small", "skip_release_small", bool,
               "Main test suite skips release-small builds"),
    OptionSpec("skip-release-fast", "skip_release_fast", bool,
               "Main test suite skips release-fast builds"),
    OptionSpec("skip-release-safe", "skip_release_safe", bool,
               "Main test suite skips release-safe builds"),
)

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


def parse_bool(name: str, text: str) -> bool:
    """Parse a boolean option value.

    Raises:
        OptionError: If the text is not a recognized boolean.
    """
    lowered = text.strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise OptionError(f"option {name!r} expects a boolean, got {text!r}")


def parse_option_value(spec: OptionSpec, text: str) -> Any:
    """Convert the string form of an option to its declared type."""
    if spec.kind is bool:
        return parse_bool(spec.name, text)
    if spec.kind is int:
        try:
            value = int(text)
        except ValueError:
            raise OptionError(
                f"option {spec.name!r} expects an integer, got {text!r}"
            ) from None
        if value < 0:
            raise OptionError(f"option {spec.name!r} must not be negative")
        return value
    return text


def _parse_specs(
    variables: Mapping[str, str], specs: tuple[OptionSpec, ...]
) -> dict[str, Any]:
    """Pick the variables named by `specs` and convert them.

    Names not declared in `specs` are left for other option groups.
    """
    by_name = {spec.name: spec for spec in specs}
    result: dict[str, Any] = {}
    for name, text in variables.items():
        spec = by_name.get(name)
        if spec is not None:
            result[spec.field] = parse_option_value(spec, text)
    return result


def check_option_names(variables: Mapping[str, str]) -> None:
    """Reject option names that no option group declares.

    Raises:
        OptionError: Naming the first unknown option.
    """
    known = {
        spec.name
        for spec in BUILD_OPTION_SPECS + TEST_OPTION_SPECS + TEST_MODE_OPTION_SPECS
    }
    for name in variables:
        if name not in known:
            raise OptionError(f"unknown build option: {name!r}")
