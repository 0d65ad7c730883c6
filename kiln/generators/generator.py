# SPDX-License-Identifier: MIT
"""Generator protocol for build description output.

Generators take an assembled BuildGraph and write files describing it
(the compiler's options module, the link plan) for the tools that run
the actual build.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from kiln.core.graph import BuildGraph

logger = logging.getLogger(__name__)


@runtime_checkable
class Generator(Protocol):
    """Protocol for build description generators."""

    @property
    def name(self) -> str:
        """Generator name (e.g., 'build_options', 'link_plan')."""
        ...

    def generate(self, graph: BuildGraph, output_dir: Path) -> Path:
        """Write the output for a build graph.

        Args:
            graph: The assembled build graph.
            output_dir: Directory to write output files to.

        Returns:
            Path of the file written.
        """
        ...


class BaseGenerator:
    """Base class for generators that write one JSON document."""

    def __init__(self, name: str, filename: str) -> None:
        """Initialize a generator.

        Args:
            name: Generator name.
            filename: Name of the file written into the output directory.
        """
        self._name = name
        self.filename = filename

    @property
    def name(self) -> str:
        return self._name

    def document(self, graph: BuildGraph) -> Any:
        """Build the JSON document. Subclasses must implement."""
        raise NotImplementedError

    def generate(self, graph: BuildGraph, output_dir: Path) -> Path:
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / self.filename

        with open(output_file, "w") as f:
            json.dump(self.document(graph), f, indent=2)
            f.write("\n")

        logger.info("wrote %s", output_file)
        return output_file

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
