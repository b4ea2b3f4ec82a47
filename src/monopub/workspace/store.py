"""Manifest discovery and persistence."""

from __future__ import annotations

import fnmatch
import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from monopub.errors import ConfigurationError
from monopub.workspace.package import MANIFEST_NAME, Package

logger = logging.getLogger(__name__)


class ManifestStore:
    """Reads and writes package.json manifests below a root directory.

    Attributes:
        root: Workspace root; glob patterns are relative to it.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def discover(
        self,
        patterns: Sequence[str],
        ignore: Sequence[str] | None = None,
    ) -> list[Package]:
        """Load every package whose directory matches one of the patterns.

        Matches of a single pattern are visited in sorted order; patterns
        are visited in the order given. The resulting order is the
        discovery order used for every tie-break downstream.

        Args:
            patterns: Glob patterns relative to root (e.g. ``packages/*``).
            ignore: Glob patterns (relative to root) of directories to skip.

        Returns:
            Packages in discovery order.

        Raises:
            ConfigurationError: On duplicate names, unreadable manifests or
                absolute patterns outside the root.
        """
        packages: list[Package] = []
        seen_paths: set[Path] = set()
        by_name: dict[str, Package] = {}

        for pattern in patterns:
            for path in sorted(self.root.glob(self._relative_pattern(pattern))):
                if not (path / MANIFEST_NAME).is_file():
                    continue
                resolved = path.resolve()
                if resolved in seen_paths or self._is_ignored(path, ignore):
                    continue
                seen_paths.add(resolved)

                pkg = Package.from_path(path)
                if pkg.name in by_name:
                    raise ConfigurationError(
                        f"Duplicate package name '{pkg.name}' "
                        f"({by_name[pkg.name].path} and {pkg.path})"
                    )
                by_name[pkg.name] = pkg
                packages.append(pkg)

        logger.debug("Discovered %d packages matching %s", len(packages), list(patterns))
        return packages

    def load_root(self) -> Package | None:
        """Load the root manifest, if the root has one."""
        if not (self.root / MANIFEST_NAME).is_file():
            return None
        return Package.from_path(self.root)

    def write(self, path: Path, manifest: dict[str, Any]) -> None:
        """Persist one manifest to ``path/package.json``.

        Key order is preserved; output uses two-space indentation and a
        trailing newline like npm does.
        """
        target = path / MANIFEST_NAME
        content = json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"
        target.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", target)

    def _is_ignored(self, path: Path, ignore: Sequence[str] | None) -> bool:
        if not ignore:
            return False
        try:
            rel = path.relative_to(self.root).as_posix()
        except ValueError:
            rel = path.as_posix()
        return any(fnmatch.fnmatch(rel, pattern) for pattern in ignore)

    def _relative_pattern(self, pattern: str) -> str:
        if not Path(pattern).is_absolute():
            return pattern
        try:
            return Path(pattern).relative_to(self.root).as_posix()
        except ValueError:
            try:
                return Path(pattern).relative_to(self.root.resolve()).as_posix()
            except ValueError:
                raise ConfigurationError(
                    f"Package pattern '{pattern}' is outside the workspace root {self.root}"
                ) from None
