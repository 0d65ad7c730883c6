# SPDX-License-Identifier: MIT
"""Normalization of build options.

Some options imply others: embedding the toolchain needs libc and
libc++, the legacy front-end needs the toolchain, and a few options
default from the artifact's build mode. Those implications are written
as an ordered tuple of pure rules. Each rule takes the options and the
artifact traits and returns new options; later rules see the result of
earlier ones.

Applying the rules to already-normalized options changes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

from kiln.core.options import BuildMode, BuildOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactTraits:
    """The properties of the artifact that option defaults depend on."""

    mode: BuildMode
    strip: bool = False


Rule = Callable[[BuildOptions, ArtifactTraits], BuildOptions]


def require_llvm(options: BuildOptions, traits: ArtifactTraits) -> BuildOptions:
    """The legacy front-end and static linking both need the toolchain."""
    if (options.legacy_frontend or options.static_llvm) and not options.enable_llvm:
        return replace(options, enable_llvm=True)
    return options


def require_system_runtimes(
    options: BuildOptions, traits: ArtifactTraits
) -> BuildOptions:
    """The embedded toolchain and Tracy are C++ and need libc and libc++."""
    if options.enable_llvm or options.tracy is not None:
        if not (options.link_libc and options.link_libcxx):
            return replace(options, link_libc=True, link_libcxx=True)
    return options


def default_mem_leak_frames(
    options: BuildOptions, traits: ArtifactTraits
) -> BuildOptions:
    if options.mem_leak_frames is not None:
        return options
    if traits.strip or traits.mode is not BuildMode.DEBUG:
        return replace(options, mem_leak_frames=0)
    return replace(options, mem_leak_frames=4)


def default_logging(options: BuildOptions, traits: ArtifactTraits) -> BuildOptions:
    if options.enable_logging is not None:
        return options
    return replace(options, enable_logging=traits.mode is BuildMode.DEBUG)


RULES: tuple[Rule, ...] = (
    require_llvm,
    require_system_runtimes,
    default_mem_leak_frames,
    default_logging,
)


def normalize(
    options: BuildOptions,
    traits: ArtifactTraits,
    rules: tuple[Rule, ...] = RULES,
) -> BuildOptions:
    """Apply the implication rules in order.

    Args:
        options: Options as given by the user.
        traits: Mode and strip flag of the artifact being configured.
        rules: Rules to apply; defaults to RULES.

    Returns:
        The normalized options. `options` itself is not modified.
    """
    result = options
    for rule in rules:
        updated = rule(result, traits)
        if updated != result:
            logger.debug("option rule %s applied", rule.__name__)
        result = updated
    return result
