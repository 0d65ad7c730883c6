# SPDX-License-Identifier: MIT
"""Version resolution for the compiler build.

The version of a build is either given explicitly (version-string=...)
or derived from `git describe`:

    0.10.0                 tagged release; must equal the base version
    0.9.0-2025-gecf0050a9  development build after tag 0.9.0; becomes
                           0.10.0-dev.2025+ecf0050a9 (semver.org form)

Anything else git prints is reported and the plain base version is used.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from packaging.version import Version

from kiln.core.errors import (
    VersionError,
    VersionMismatchError,
    VersionUnavailableError,
)

logger = logging.getLogger(__name__)

# Git prefixes abbreviated commit hashes in `describe` output with 'g'.
COMMIT_ID_PREFIX = "g"

_SEMVER_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@dataclass(frozen=True)
class SemanticVersion:
    """A semver.org version: major.minor.patch[-pre][+build]."""

    major: int
    minor: int
    patch: int
    pre: str | None = None
    build: str | None = None

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse a semantic version string.

        Raises:
            VersionError: If `text` is not a semantic version.
        """
        match = _SEMVER_RE.match(text)
        if match is None:
            raise VersionError(f"invalid semantic version: {text!r}")
        return cls(
            major=int(match["major"]),
            minor=int(match["minor"]),
            patch=int(match["patch"]),
            pre=match["pre"],
            build=match["build"],
        )

    @property
    def core(self) -> str:
        """The major.minor.patch part."""
        return f"{self.major}.{self.minor}.{self.patch}"

    def __str__(self) -> str:
        text = self.core
        if self.pre:
            text += f"-{self.pre}"
        if self.build:
            text += f"+{self.build}"
        return text


# Version of the compiler this tree builds. Bump together with the tag.
BASE_VERSION = SemanticVersion(0, 10, 0)


@dataclass(frozen=True)
class VersionInfo:
    """The resolved version string and its parsed form."""

    version: str
    semver: SemanticVersion

    @classmethod
    def from_string(cls, version: str) -> VersionInfo:
        return cls(version=version, semver=SemanticVersion.parse(version))


def git_describe(root_dir: Path | str) -> str | None:
    """Run `git describe` for the nearest x.y.z tag.

    Returns:
        The trimmed output, or None if git is missing, the directory is
        not a repository, or git exits with an error.
    """
    cmd = ["git", "-C", str(root_dir), "describe", "--match", "*.*.*", "--tags"]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        logger.debug("unable to run git: %s", e)
        return None
    if result.returncode != 0:
        logger.debug("git describe failed: %s", result.stderr.strip())
        return None
    return result.stdout.strip(" \n\r")


def version_from_describe(describe: str, base: SemanticVersion) -> str:
    """Turn `git describe` output into a version string.

    Args:
        describe: Trimmed output of git_describe().
        base: The compiler's base version.

    Returns:
        The base version for a matching tag, a '-dev.N+hash' version for
        a development build, or the base version when the output has an
        unexpected shape.

    Raises:
        VersionMismatchError: Tag differs from the base version, or the
            base version is not newer than the tagged ancestor.
        VersionError: Development build output that cannot be parsed.
    """
    version_string = base.core
    separators = describe.count("-")

    if separators == 0:
        # Tagged release version (e.g. 0.9.0).
        if describe != version_string:
            raise VersionMismatchError(
                f"version '{version_string}' does not match Git tag '{describe}'",
                expected=version_string,
                found=describe,
            )
        return version_string

    if separators == 2:
        # Untagged development build (e.g. 0.9.0-2025-gecf0050a9).
        tagged_ancestor, commit_height, commit_id = describe.split("-")

        try:
            ancestor = SemanticVersion.parse(tagged_ancestor)
        except VersionError:
            raise VersionError(
                f"unexpected tagged ancestor in `git describe` output: {describe}"
            ) from None
        if not Version(version_string) > Version(ancestor.core):
            raise VersionMismatchError(
                f"version '{version_string}' must be greater than tagged "
                f"ancestor '{tagged_ancestor}'",
                expected=version_string,
                found=tagged_ancestor,
            )

        if not commit_id.startswith(COMMIT_ID_PREFIX):
            raise VersionError(f"unexpected `git describe` output: {describe}")

        commit_hash = commit_id[len(COMMIT_ID_PREFIX) :]

        # Reformatted in accordance with the https://semver.org specification.
        return f"{version_string}-dev.{commit_height}+{commit_hash}"

    # Unknown shape: keep going with the base version.
    logger.warning("unexpected `git describe` output: %s", describe)
    return version_string


def resolve_version(
    base: SemanticVersion = BASE_VERSION,
    override: str | None = None,
    *,
    root_dir: Path | str = ".",
) -> VersionInfo:
    """Resolve the version of this build.

    Args:
        base: The compiler's base version.
        override: Explicit version string; when given git is not queried.
        root_dir: Source tree to run `git describe` in.

    Raises:
        VersionUnavailableError: No override and git cannot be queried.
        VersionError: The version is inconsistent or not a semantic version.
    """
    if override is not None:
        if not override:
            raise VersionError("version-string must not be empty")
        logger.debug("using version override %s", override)
        return VersionInfo.from_string(override)

    describe = git_describe(root_dir)
    if describe is None:
        raise VersionUnavailableError()

    version = version_from_describe(describe, base)
    logger.info("resolved version %s (git describe: %s)", version, describe)
    return VersionInfo.from_string(version)
