# SPDX-License-Identifier: MIT
"""Custom exceptions for kiln.

All kiln exceptions inherit from KilnError. Anything raised from the
configure pass is a ConfigureError; the CLI reports these and exits.
"""

from __future__ import annotations


class KilnError(Exception):
    """Base class for all kiln exceptions.

    Attributes:
        message: The error message.
        hint: Optional suggestion printed after the message.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        self.message = message
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message


class OptionError(KilnError):
    """A build option was given a value of the wrong type or an unknown name."""


class ConfigureError(KilnError):
    """Error during the configure pass.

    Raised when version resolution, config.h parsing or toolchain
    linking cannot produce a usable build description.
    """


class VersionError(ConfigureError):
    """The version string could not be resolved or parsed."""


class VersionMismatchError(VersionError):
    """The base version disagrees with what git reports.

    Attributes:
        expected: The compiler's base version.
        found: The tag (or tagged ancestor) reported by git.
    """

    def __init__(self, message: str, *, expected: str, found: str) -> None:
        self.expected = expected
        self.found = found
        super().__init__(message)


class VersionUnavailableError(VersionError):
    """git could not be queried and no override was given."""

    def __init__(self) -> None:
        super().__init__(
            "version info cannot be retrieved from git",
            hint="the version must be provided using version-string=...",
        )


class ConfigHeaderError(ConfigureError):
    """config.h could not be read or contains a malformed define.

    Attributes:
        path: Path of the header, if known.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class ToolchainLinkError(ConfigureError):
    """Linking against the embedded toolchain cannot be set up."""


class LibraryNotFoundError(ToolchainLinkError):
    """A required static library could not be located.

    Attributes:
        library: The archive name that was searched for (e.g. 'libc++.a').
    """

    def __init__(self, library: str, message: str | None = None) -> None:
        self.library = library
        super().__init__(message or f"unable to determine path to {library}")
