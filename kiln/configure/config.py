# SPDX-License-Identifier: MIT
"""Configure context for kiln.

The Configure class is the context of one configure pass: where the
source tree is, which compiler executable is running the build, and a
small JSON cache recording what was resolved (version, config.h) so
later tools can inspect it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kiln.configure.config_h import find_and_parse_config_h
from kiln.configure.platform import get_platform
from kiln.configure.version import BASE_VERSION, resolve_version

if TYPE_CHECKING:
    from kiln.configure.config_h import CMakeConfig
    from kiln.configure.version import SemanticVersion, VersionInfo
    from kiln.core.options import BuildOptions

logger = logging.getLogger(__name__)


class Configure:
    """Context for the configure pass.

    Example:
        config = Configure(build_dir=Path("build"), root_dir=Path("."))
        version = config.resolve_version(options.version_string)
        cmake_cfg = config.cmake_config(options)
        config.save()

    Attributes:
        platform: The host platform.
        build_dir: Directory for generated files and the cache.
        root_dir: Root of the source tree (where git is queried).
        compiler_exe: Compiler executable; config.h is searched upward
            from its directory.
    """

    def __init__(
        self,
        *,
        build_dir: Path | str = "build",
        root_dir: Path | str = ".",
        compiler_exe: Path | str | None = None,
        cache_file: str = "kiln_config.json",
    ) -> None:
        """Create a configure context.

        Args:
            build_dir: Directory for build outputs.
            root_dir: Source tree root.
            compiler_exe: Compiler running the build. config.h is
                searched upward from its directory, or from build_dir
                when not given.
            cache_file: Name of the cache file within build_dir.
        """
        self.platform = get_platform()
        self.build_dir = Path(build_dir)
        self.root_dir = Path(root_dir)
        self.compiler_exe = Path(compiler_exe) if compiler_exe else None
        self._cache_file = cache_file
        self._cache: dict[str, Any] = {}

        self._load_cache()

    def _cache_path(self) -> Path:
        return self.build_dir / self._cache_file

    def _load_cache(self) -> None:
        """Load configuration from cache file if it exists."""
        cache_path = self._cache_path()
        if cache_path.exists():
            try:
                with open(cache_path) as f:
                    self._cache = json.load(f)
            except (json.JSONDecodeError, OSError):
                self._cache = {}

    def save(self, path: Path | None = None) -> None:
        """Save the cache file.

        Args:
            path: Optional path override for cache file.
        """
        cache_path = path or self._cache_path()
        cache_path.parent.mkdir(parents=True, exist_ok=True)

        with open(cache_path, "w") as f:
            json.dump(self._cache, f, indent=2, default=str)
            f.write("\n")

    def set(self, key: str, value: Any) -> None:
        self._cache[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._cache.get(key, default)

    def resolve_version(
        self,
        override: str | None = None,
        base: SemanticVersion = BASE_VERSION,
    ) -> VersionInfo:
        """Resolve the build version and record it in the cache."""
        info = resolve_version(base, override, root_dir=self.root_dir)
        self.set("version", info.version)
        return info

    def cmake_config(self, options: BuildOptions) -> CMakeConfig | None:
        """Locate and parse config.h unless static linking is forced.

        Returns:
            The parsed config, or None when static linking is forced or
            no config.h exists.
        """
        if options.static_llvm:
            self.set("config_h", None)
            return None
        search_dir = (
            self.compiler_exe.parent if self.compiler_exe else self.build_dir
        )
        found = find_and_parse_config_h(options.config_h_path, search_dir)
        if found is None:
            self.set("config_h", None)
            return None
        cmake_cfg, path = found
        logger.info("using CMake configuration from %s", path)
        self.set("config_h", str(path))
        return cmake_cfg

    def __repr__(self) -> str:
        return (
            f"Configure(platform={self.platform}, root_dir={self.root_dir}, "
            f"build_dir={self.build_dir})"
        )


def load_config(path: Path | str = "build/kiln_config.json") -> dict[str, Any]:
    """Load a saved configuration.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data: dict[str, Any] = json.load(f)
        return data
