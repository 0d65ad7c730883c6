# SPDX-License-Identifier: MIT
"""Typed key/value options handed to the compiler's own sources.

The compiler reads its build configuration (version, whether LLVM is
available, leak-frame count, ...) from an options module generated at
build time. kiln records those values here; a generator serializes them.
"""

from __future__ import annotations

from typing import Any, Union

from kiln.configure.version import SemanticVersion

OptionValue = Union[bool, int, str, None, SemanticVersion]


class OptionsModule:
    """Ordered set of named options for one artifact.

    Example:
        module = OptionsModule("zig")
        module.add_option("have_llvm", True)
        module.add_option("mem_leak_frames", 4)
    """

    __slots__ = ("name", "_values")

    def __init__(self, name: str) -> None:
        self.name = name
        self._values: dict[str, OptionValue] = {}

    def add_option(self, name: str, value: OptionValue) -> None:
        """Record an option.

        Raises:
            ValueError: If the option was already added.
        """
        if name in self._values:
            raise ValueError(f"Option '{name}' already added to {self.name}")
        self._values[name] = value

    def __getitem__(self, name: str) -> OptionValue:
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def names(self) -> list[str]:
        return list(self._values)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for name, value in self._values.items():
            if isinstance(value, SemanticVersion):
                result[name] = {
                    "major": value.major,
                    "minor": value.minor,
                    "patch": value.patch,
                    "pre": value.pre,
                    "build": value.build,
                }
            else:
                result[name] = value
        return result

    def __repr__(self) -> str:
        return f"OptionsModule({self.name!r}, options={len(self._values)})"
