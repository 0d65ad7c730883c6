# SPDX-License-Identifier: MIT
"""Build graph container.

The BuildGraph holds the artifacts and named steps of one build
description. It does not schedule or run anything; it only records what
exists and what depends on what, for a generator or an external task
runner to consume.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from kiln.configure.platform import Platform
from kiln.core.artifact import Artifact, ArtifactKind
from kiln.core.options import BuildMode
from kiln.core.options_module import OptionsModule

logger = logging.getLogger(__name__)


class Step:
    """A named, user-invocable step (e.g. 'test').

    Attributes:
        name: Step name as typed on the command line.
        description: One-line help text.
        dependencies: Steps and artifacts that must complete first.
    """

    __slots__ = ("name", "description", "dependencies")

    def __init__(self, name: str, description: str) -> None:
        self.name = name
        self.description = description
        self.dependencies: list[Step | Artifact] = []

    def depend_on(self, other: Step | Artifact) -> Step:
        if other not in self.dependencies:
            self.dependencies.append(other)
        return self

    def __repr__(self) -> str:
        deps = ", ".join(d.name for d in self.dependencies)
        return f"Step({self.name!r}, deps=[{deps}])"


class BuildGraph:
    """Top-level container for one build description.

    Example:
        graph = BuildGraph("zig", root_dir=Path("."))
        exe = graph.add_executable("zig", "src/main.zig", target=host)
        graph.default_step.depend_on(exe)

    Attributes:
        name: Project name.
        root_dir: Source root of the project.
        build_dir: Directory for generated files.
    """

    __slots__ = (
        "name",
        "root_dir",
        "build_dir",
        "_artifacts",
        "_steps",
        "_options_modules",
    )

    def __init__(
        self,
        name: str,
        *,
        root_dir: Path | str | None = None,
        build_dir: Path | str = "build",
    ) -> None:
        self.name = name
        self.root_dir = Path(root_dir) if root_dir else Path.cwd()
        self.build_dir = Path(build_dir)
        self._artifacts: dict[str, Artifact] = {}
        self._steps: dict[str, Step] = {}
        self._options_modules: dict[str, OptionsModule] = {}
        self.step("install", "Build and install the default artifacts")

    @property
    def default_step(self) -> Step:
        return self._steps["install"]

    def _add_artifact(
        self,
        name: str,
        kind: ArtifactKind,
        root_source: str | None,
        *,
        target: Platform,
        mode: BuildMode,
    ) -> Artifact:
        if name in self._artifacts:
            raise ValueError(f"Artifact '{name}' already exists in build graph")
        artifact = Artifact(
            name, kind, root_source=root_source, target=target, mode=mode
        )
        self._artifacts[name] = artifact
        logger.debug("added %s artifact %s", kind, name)
        return artifact

    def add_executable(
        self,
        name: str,
        root_source: str,
        *,
        target: Platform,
        mode: BuildMode = BuildMode.DEBUG,
    ) -> Artifact:
        return self._add_artifact(
            name, "executable", root_source, target=target, mode=mode
        )

    def add_test(
        self,
        name: str,
        root_source: str,
        *,
        target: Platform,
        mode: BuildMode = BuildMode.DEBUG,
    ) -> Artifact:
        return self._add_artifact(
            name, "test", root_source, target=target, mode=mode
        )

    def add_static_library(
        self,
        name: str,
        *,
        target: Platform,
        mode: BuildMode = BuildMode.DEBUG,
    ) -> Artifact:
        return self._add_artifact(
            name, "static_library", None, target=target, mode=mode
        )

    def step(self, name: str, description: str) -> Step:
        """Create a named step.

        Raises:
            ValueError: If a step with this name already exists.
        """
        if name in self._steps:
            raise ValueError(f"Step '{name}' already exists in build graph")
        step = Step(name, description)
        self._steps[name] = step
        return step

    def add_options(self, name: str) -> OptionsModule:
        """Create the options module for the artifact called `name`.

        Raises:
            ValueError: If the artifact already has an options module.
        """
        if name in self._options_modules:
            raise ValueError(f"Options module '{name}' already exists")
        module = OptionsModule(name)
        self._options_modules[name] = module
        return module

    def get_step(self, name: str) -> Step | None:
        return self._steps.get(name)

    def get_artifact(self, name: str) -> Artifact | None:
        return self._artifacts.get(name)

    @property
    def artifacts(self) -> list[Artifact]:
        return list(self._artifacts.values())

    @property
    def options_modules(self) -> list[OptionsModule]:
        return list(self._options_modules.values())

    @property
    def steps(self) -> list[Step]:
        return list(self._steps.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "artifacts": [a.to_dict() for a in self.artifacts],
            "steps": [
                {
                    "name": s.name,
                    "description": s.description,
                    "dependencies": [d.name for d in s.dependencies],
                }
                for s in self.steps
            ],
        }

    def __repr__(self) -> str:
        return (
            f"BuildGraph({self.name!r}, artifacts={len(self._artifacts)}, "
            f"steps={len(self._steps)})"
        )
