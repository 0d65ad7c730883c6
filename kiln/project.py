# SPDX-License-Identifier: MIT
"""Assembly of the compiler's build description.

link() configures one artifact: it normalizes the options, records the
options module, resolves the version and adds the legacy front-end,
embedded toolchain and Tracy directives. build() creates the compiler
executable, its test binary and the test steps, and links both.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kiln.builders.softfloat import SoftFloatLibrary
from kiln.core.normalize import ArtifactTraits, normalize
from kiln.core.options import BuildMode, parse_bool
from kiln.toolchains.embedded import EmbeddedToolchainLinker
from kiln.toolchains.manifest import (
    EXE_CFLAGS,
    LEGACY_OPTIMIZED_C_SOURCES,
    LEGACY_SOURCES,
    OPTIMIZED_CFLAGS,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from kiln.configure.config import Configure
    from kiln.configure.platform import Platform
    from kiln.configure.version import VersionInfo
    from kiln.core.artifact import Artifact
    from kiln.core.graph import BuildGraph
    from kiln.core.options import BuildOptions, TestOptions
    from kiln.core.options_module import OptionsModule
    from kiln.toolchains.embedded import LinkReport

logger = logging.getLogger(__name__)

MAIN_SOURCE = "src/main.zig"
LEGACY_MAIN_SOURCE = "src/stage1.zig"
TEST_SOURCE = "src/test.zig"

TRACY_CLIENT_SOURCE = "TracyClient.cpp"
TRACY_CFLAGS: tuple[str, ...] = ("-DTRACY_ENABLE=1", "-fno-sanitize=undefined")
# Tracy needs Windows 7 APIs that mingw headers hide by default.
TRACY_MINGW_CFLAGS: tuple[str, ...] = TRACY_CFLAGS + ("-D_WIN32_WINNT=0x601",)
TRACY_WINDOWS_LIBS: tuple[str, ...] = ("dbghelp", "ws2_32")


@dataclass(frozen=True)
class LinkResult:
    """What link() resolved for one artifact.

    Attributes:
        options: The normalized options.
        version: The resolved version.
        options_module: Options handed to the compiler sources.
        report: Outcome of linking the embedded toolchain.
    """

    options: BuildOptions
    version: VersionInfo
    options_module: OptionsModule
    report: LinkReport


@dataclass(frozen=True)
class BuildResult:
    """The artifacts build() created and how each was linked."""

    exe: Artifact
    test: Artifact
    exe_link: LinkResult
    test_link: LinkResult


def add_options_module(
    graph: BuildGraph,
    artifact: Artifact,
    options: BuildOptions,
    version: VersionInfo,
    test_options: TestOptions | None = None,
) -> OptionsModule:
    """Record the options module for `artifact` from normalized options."""
    if options.mem_leak_frames is None or options.enable_logging is None:
        raise ValueError(
            f"options for {artifact.name!r} must be normalized before they "
            "are recorded"
        )
    module = graph.add_options(artifact.name)

    module.add_option("mem_leak_frames", options.mem_leak_frames)
    module.add_option("skip_non_native", options.skip_non_native)
    module.add_option("have_llvm", options.enable_llvm)
    module.add_option("llvm_has_m68k", options.llvm_has_m68k)
    module.add_option("llvm_has_csky", options.llvm_has_csky)
    module.add_option("llvm_has_ve", options.llvm_has_ve)
    module.add_option("llvm_has_arc", options.llvm_has_arc)
    module.add_option("force_gpa", options.force_gpa)

    module.add_option("version", version.version)
    module.add_option("semver", version.semver)
    module.add_option("enable_logging", options.enable_logging)
    module.add_option("enable_link_snapshots", options.enable_link_snapshots)
    module.add_option("enable_tracy", options.tracy is not None)
    module.add_option("enable_tracy_callstack", options.tracy_callstack)
    module.add_option("enable_tracy_allocation", options.tracy_allocation)
    module.add_option("is_stage1", options.legacy_frontend)
    module.add_option("omit_stage2", options.omit_self_hosted)

    if test_options is not None:
        module.add_option("skip_compile_errors", test_options.skip_compile_errors)
    return module


def add_legacy_frontend(artifact: Artifact, softfloat: SoftFloatLibrary) -> None:
    """Compile the legacy C++ front-end into `artifact`."""
    artifact.add_include_dir("src")
    artifact.add_include_dir("deps/SoftFloat-3e/source/include")
    artifact.define_c_macro("ZIG_LINK_MODE", "Static")
    softfloat.link(artifact)
    artifact.add_c_source_files(LEGACY_SOURCES, EXE_CFLAGS)
    artifact.add_c_source_files(LEGACY_OPTIMIZED_C_SOURCES, OPTIMIZED_CFLAGS)


def add_tracy(artifact: Artifact, tracy_path: str) -> None:
    """Compile the Tracy client from the sources at `tracy_path`."""
    target = artifact.target
    flags = TRACY_MINGW_CFLAGS if target.is_mingw else TRACY_CFLAGS

    artifact.add_include_dir(tracy_path)
    artifact.add_c_source_file(os.path.join(tracy_path, TRACY_CLIENT_SOURCE), flags)

    if target.is_windows:
        for lib_name in TRACY_WINDOWS_LIBS:
            artifact.link_system_library(lib_name)


def link(
    graph: BuildGraph,
    artifact: Artifact,
    options: BuildOptions,
    *,
    configure: Configure,
    softfloat: SoftFloatLibrary,
    test_options: TestOptions | None = None,
) -> LinkResult:
    """Configure `artifact` as the compiler (or its test binary).

    Steps run in this order: normalize the options, resolve the version
    and record the options module, add the legacy front-end, link the
    embedded toolchain, add Tracy, and finally link libc and libc++.

    Args:
        graph: Graph the artifact belongs to.
        artifact: The compiler executable or test artifact.
        options: Options as given by the user.
        configure: Configure context (version and config.h lookup).
        softfloat: SoftFloat library cache shared by all artifacts.
        test_options: Test settings, when `artifact` is a test binary.

    Returns:
        The normalized options, the version and how linking went.

    Raises:
        VersionError: The version cannot be resolved.
        ConfigHeaderError: config.h exists but cannot be used.
        ToolchainLinkError: The embedded toolchain cannot be linked.
    """
    traits = ArtifactTraits(mode=artifact.mode, strip=artifact.strip)
    options = normalize(options, traits)

    version = configure.resolve_version(options.version_string)
    module = add_options_module(graph, artifact, options, version, test_options)

    if options.legacy_frontend:
        add_legacy_frontend(artifact, softfloat)

    cmake_config = configure.cmake_config(options) if options.enable_llvm else None
    report = EmbeddedToolchainLinker(options, cmake_config).apply(artifact)

    if options.tracy is not None:
        add_tracy(artifact, options.tracy)

    if options.link_libc:
        artifact.link_libc()
    if options.link_libcxx and not options.enable_llvm:
        artifact.link_libcpp()

    return LinkResult(
        options=options, version=version, options_module=module, report=report
    )


def build(
    graph: BuildGraph,
    options: BuildOptions,
    test_options: TestOptions,
    *,
    configure: Configure,
    target: Platform | None = None,
    mode: BuildMode = BuildMode.DEBUG,
    strip: bool = False,
    single_threaded: bool | None = None,
    softfloat: SoftFloatLibrary | None = None,
) -> BuildResult:
    """Add the compiler, its tests and the test steps to `graph`.

    Args:
        graph: Graph to populate.
        options: Options as given by the user.
        test_options: Test settings.
        configure: Configure context.
        target: Platform the compiler is built for (default: host).
        mode: Optimization mode of the compiler and its test binary.
        strip: Omit debug information from the compiler.
        single_threaded: Build single-threaded artifacts.
        softfloat: SoftFloat cache (default: a new one for `graph`).

    Returns:
        The created artifacts and their link results.
    """
    host = configure.platform
    target = target or host
    softfloat = softfloat or SoftFloatLibrary(graph)

    main_source = LEGACY_MAIN_SOURCE if options.legacy_frontend else MAIN_SOURCE
    exe = graph.add_executable("zig", main_source, target=target, mode=mode)
    exe.strip = strip
    exe.single_threaded = single_threaded
    graph.default_step.depend_on(exe)

    test = graph.add_test("test", TEST_SOURCE, target=host, mode=mode)
    test.add_package_path("test_cases", "test/cases.zig")
    test.single_threaded = single_threaded
    test_compiler_step = graph.step("test-compiler", "Run the compiler tests")
    test_compiler_step.depend_on(test)

    if target.is_mingw:
        # LTO does not work with mingw.
        exe.want_lto = False
        test.want_lto = False

    # The legacy front-end imports compiler_rt when built by CMake; here
    # the compiler gets a real one, so the package is left empty.
    if options.enable_llvm and options.legacy_frontend:
        exe.add_package_path("compiler_rt", "src/empty.zig")

    exe_link = link(graph, exe, options, configure=configure, softfloat=softfloat)

    test_link = link(
        graph,
        test,
        exe_link.options,
        configure=configure,
        softfloat=softfloat,
        test_options=test_options,
    )

    toolchain_step = graph.step("test-toolchain", "Run the tests for the toolchain")
    if not test_options.skip_self_hosted_tests:
        toolchain_step.depend_on(exe)
        toolchain_step.depend_on(test_compiler_step)

    test_step = graph.step("test", "Run all the tests")
    test_step.depend_on(toolchain_step)

    logger.info(
        "assembled %s: version %s, toolchain %s",
        graph.name,
        exe_link.version.version,
        exe_link.report.strategy.value,
    )
    return BuildResult(exe=exe, test=test, exe_link=exe_link, test_link=test_link)


def get_test_modes(variables: Mapping[str, str]) -> tuple[BuildMode, ...]:
    """Select the modes the test suite runs in.

    Reads skip-debug, skip-release and skip-release-{safe,fast,small};
    each of the latter three defaults to skip-release.

    Returns:
        The selected modes in the order debug, release-safe,
        release-fast, release-small.
    """

    def flag(name: str, default: bool) -> bool:
        if name not in variables:
            return default
        return parse_bool(name, variables[name])

    skip_debug = flag("skip-debug", False)
    skip_release = flag("skip-release", False)
    skips = (
        (BuildMode.DEBUG, skip_debug),
        (BuildMode.RELEASE_SAFE, flag("skip-release-safe", skip_release)),
        (BuildMode.RELEASE_FAST, flag("skip-release-fast", skip_release)),
        (BuildMode.RELEASE_SMALL, flag("skip-release-small", skip_release)),
    )
    return tuple(mode for mode, skipped in skips if not skipped)
