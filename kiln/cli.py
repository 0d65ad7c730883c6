# SPDX-License-Identifier: MIT
"""Command-line interface for kiln."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from kiln.configure.config import Configure
from kiln.configure.platform import Platform
from kiln.configure.version import resolve_version
from kiln.core.errors import KilnError
from kiln.core.graph import BuildGraph
from kiln.core.options import (
    BUILD_OPTION_SPECS,
    TEST_MODE_OPTION_SPECS,
    TEST_OPTION_SPECS,
    BuildMode,
    BuildOptions,
    OptionSpec,
    TestOptions,
    check_option_names,
)
from kiln.generators import BuildOptionsGenerator, LinkPlanGenerator
from kiln.project import build, get_test_modes

logger = logging.getLogger("kiln")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def parse_variables(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Parse NAME=value arguments from a list.

    Args:
        args: List of arguments.

    Returns:
        Tuple of (variables dict, remaining args).
    """
    variables: dict[str, str] = {}
    remaining: list[str] = []

    for arg in args:
        if "=" in arg and not arg.startswith("-"):
            key, _, value = arg.partition("=")
            if key:  # Valid NAME=value
                variables[key] = value
            else:
                remaining.append(arg)
        else:
            remaining.append(arg)

    return variables, remaining


def cmd_configure(args: argparse.Namespace) -> int:
    """Assemble the build description and write it to the build directory."""
    setup_logging(args.verbose, args.debug)

    variables, remaining = parse_variables(args.extra)
    if remaining:
        logger.error("Expected NAME=value, got: %s", " ".join(remaining))
        return 1

    build_dir = Path(args.build_dir)
    root_dir = Path(args.root)

    try:
        check_option_names(variables)
        options = BuildOptions.from_vars(variables)
        test_options = TestOptions.from_vars(variables, get_test_modes(variables))
        mode = BuildMode.parse(args.mode)
        target = Platform.from_triple(args.target) if args.target else None

        config = Configure(
            build_dir=build_dir, root_dir=root_dir, compiler_exe=args.compiler_exe
        )
        graph = BuildGraph("zig", root_dir=root_dir, build_dir=build_dir)
        result = build(
            graph,
            options,
            test_options,
            configure=config,
            target=target,
            mode=mode,
            strip=args.strip,
            single_threaded=args.single_threaded,
        )
    except KilnError as e:
        logger.error("%s", e)
        return 1

    for generator in (BuildOptionsGenerator(), LinkPlanGenerator()):
        generator.generate(graph, build_dir)

    exe_link = result.exe_link
    config.set("options", exe_link.options.to_dict())
    config.set("test_modes", [m.value for m in test_options.modes])
    config.set("link", exe_link.report.to_dict())
    config.save()

    print(f"version:   {exe_link.version.version}")
    print(f"target:    {result.exe.target}")
    print(f"mode:      {mode.value}")
    print(f"toolchain: {exe_link.report.strategy.value}")
    for warning in exe_link.report.warnings:
        print(f"warning:   {warning}")
    print(f"Generated {build_dir / 'link_plan.json'}")
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Print the version this tree builds."""
    setup_logging(args.verbose, args.debug)

    try:
        info = resolve_version(override=args.version_string, root_dir=args.root)
    except KilnError as e:
        logger.error("%s", e)
        return 1

    print(info.version)
    return 0


def _print_specs(title: str, specs: tuple[OptionSpec, ...]) -> None:
    print(f"{title}:")
    for spec in specs:
        print(f"  {spec.name}=<{spec.kind.__name__}>")
        print(f"      {spec.help}")
    print()


def cmd_options(args: argparse.Namespace) -> int:
    """List the NAME=value options `kiln configure` accepts."""
    setup_logging(args.verbose, args.debug)

    _print_specs("Build options", BUILD_OPTION_SPECS)
    _print_specs("Test options", TEST_OPTION_SPECS)
    _print_specs("Test modes", TEST_MODE_OPTION_SPECS)
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "-B", "--build-dir", default="build", help="Build directory (default: build)"
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the kiln CLI."""
    parser = argparse.ArgumentParser(
        prog="kiln",
        description="Resolve the compiler's build configuration and link plan.",
        epilog="Run 'kiln <command> --help' for command-specific help.",
    )
    from kiln import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # kiln configure
    configure_parser = subparsers.add_parser(
        "configure", help="Resolve options and write the build description"
    )
    add_common_args(configure_parser)
    configure_parser.add_argument(
        "--mode",
        default=BuildMode.DEBUG.value,
        help="Build mode: debug, release-safe, release-fast, release-small",
    )
    configure_parser.add_argument(
        "--target", metavar="TRIPLE", help="Target triple (default: host)"
    )
    configure_parser.add_argument(
        "--strip", action="store_true", help="Omit debug information"
    )
    configure_parser.add_argument(
        "--single-threaded",
        action="store_const",
        const=True,
        default=None,
        help="Build artifacts that run in single threaded mode",
    )
    configure_parser.add_argument(
        "--root", default=".", help="Source tree root (default: .)"
    )
    configure_parser.add_argument(
        "--compiler-exe",
        metavar="PATH",
        help="Compiler running the build; config.h is searched from its directory",
    )
    configure_parser.add_argument(
        "extra",
        nargs="*",
        help="Build options (NAME=value)",
    )
    configure_parser.set_defaults(func=cmd_configure)

    # kiln version
    version_parser = subparsers.add_parser(
        "version", help="Print the version resolved from git"
    )
    add_common_args(version_parser)
    version_parser.add_argument(
        "--root", default=".", help="Source tree root (default: .)"
    )
    version_parser.add_argument(
        "--version-string", help="Use this version instead of asking git"
    )
    version_parser.set_defaults(func=cmd_version)

    # kiln options
    options_parser = subparsers.add_parser(
        "options", help="List the available build options"
    )
    add_common_args(options_parser)
    options_parser.set_defaults(func=cmd_options)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
