"""Workspace: root directory, configuration, packages and their graph."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from functools import cached_property
from pathlib import Path

from monopub.config import MonoPubConfig, resolve_workspace
from monopub.errors import PackageNotFoundError
from monopub.workspace.graph import DependencyGraph
from monopub.workspace.package import Package
from monopub.workspace.store import ManifestStore


class Workspace:
    """A monorepo workspace.

    Packages are loaded once, when the workspace is created. A workspace
    is meant to live for a single invocation.

    Attributes:
        root: Workspace root directory.
        config: Parsed configuration.
        store: Manifest store rooted at ``root``.
        root_package: The root package.json, if any.
    """

    def __init__(
        self,
        root: Path,
        config: MonoPubConfig,
        *,
        patterns: Sequence[str] | None = None,
        ignore: Sequence[str] | None = None,
        single: bool = False,
    ) -> None:
        """Load a workspace.

        Args:
            root: Workspace root directory.
            config: Parsed configuration.
            patterns: Package glob patterns overriding ``config.packages``.
            ignore: Ignore patterns overriding ``config.ignore``.
            single: Treat the root package.json as the only package.
        """
        self.root = root
        self.config = config
        self.store = ManifestStore(root)
        self.root_package = self.store.load_root()

        if single:
            self._packages = [self.root_package] if self.root_package else []
            self.root_package = None
        else:
            self._packages = self.store.discover(
                list(patterns) if patterns else config.packages,
                ignore if ignore is not None else config.ignore,
            )

    @classmethod
    def discover(
        cls,
        path: Path | None = None,
        *,
        patterns: Sequence[str] | None = None,
        ignore: Sequence[str] | None = None,
        single: bool = False,
    ) -> Workspace:
        """Find the workspace containing ``path`` (default: cwd) and load it.

        Raises:
            WorkspaceNotFoundError: If no workspace root is found.
            ConfigurationError: If the config or a manifest is invalid.
        """
        root, config = resolve_workspace(path)
        return cls(root, config, patterns=patterns, ignore=ignore, single=single)

    @cached_property
    def packages(self) -> dict[str, Package]:
        """Packages keyed by name, in discovery order."""
        return {p.name: p for p in self._packages}

    @cached_property
    def graph(self) -> DependencyGraph:
        """Dependency graph (validated to be acyclic on first access)."""
        return DependencyGraph(self._packages)

    def get_package(self, name: str) -> Package:
        """Get a package by name.

        Raises:
            PackageNotFoundError: If no package has that name.
        """
        try:
            return self.packages[name]
        except KeyError as e:
            raise PackageNotFoundError(name) from e

    def parallel_batches(
        self, packages: Iterable[Package] | None = None
    ) -> Iterator[list[Package]]:
        """Dependency-ordered batches of packages (see DependencyGraph)."""
        names = None if packages is None else [p.name for p in packages]
        return self.graph.parallel_batches(names)
