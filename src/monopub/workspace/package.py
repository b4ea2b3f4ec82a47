"""Package model backed by a package.json manifest."""

from __future__ import annotations

import copy
import json
from collections.abc import Collection
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from monopub.errors import ConfigurationError

MANIFEST_NAME = "package.json"


@dataclass
class Package:
    """A package discovered in the monorepo.

    Attributes:
        name: Package name (unique within the workspace).
        version: Version string from the manifest.
        path: Directory holding the manifest.
        dependencies: Runtime dependency name -> requirement.
        dev_dependencies: Development dependency name -> requirement.
        private: Private packages are never published.
        scripts: Manifest scripts (name -> command).
        manifest: Raw manifest working copy.
    """

    name: str
    version: str
    path: Path
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    private: bool = False
    scripts: dict[str, str] = field(default_factory=dict)
    manifest: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_manifest(cls, path: Path, manifest: dict[str, Any]) -> Package:
        """Build a package from an already parsed manifest.

        Private packages may omit the version; it then reads as ``0.0.0``.

        Args:
            path: Package directory.
            manifest: Parsed package.json content.

        Raises:
            ConfigurationError: If the manifest has no name, or a publishable
                package has no version.
        """
        name = manifest.get("name")
        if not name or not isinstance(name, str):
            raise ConfigurationError(f"Manifest at {path / MANIFEST_NAME} has no 'name'")

        private = bool(manifest.get("private", False))
        version = manifest.get("version")
        if not version and not private:
            raise ConfigurationError(f"Package '{name}' at {path} has no 'version'")

        return cls(
            name=name,
            version=str(version or "0.0.0"),
            path=path,
            dependencies=dict(manifest.get("dependencies") or {}),
            dev_dependencies=dict(manifest.get("devDependencies") or {}),
            private=private,
            scripts=dict(manifest.get("scripts") or {}),
            manifest=copy.deepcopy(manifest),
        )

    @classmethod
    def from_path(cls, path: Path) -> Package:
        """Load a package from a directory containing package.json.

        Raises:
            ConfigurationError: If the manifest is missing or not valid JSON.
        """
        manifest_path = path / MANIFEST_NAME
        try:
            manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ConfigurationError(f"No {MANIFEST_NAME} in {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {manifest_path}: {e}") from e

        if not isinstance(manifest, dict):
            raise ConfigurationError(f"Manifest at {manifest_path} is not an object")

        return cls.from_manifest(path, manifest)

    def local_dependency_names(self, local_names: Collection[str]) -> list[str]:
        """Names of dependencies that are workspace packages, in manifest order."""
        names: list[str] = []
        for dep in [*self.dependencies, *self.dev_dependencies]:
            if dep in local_names and dep not in names:
                names.append(dep)
        return names

    def __hash__(self) -> int:
        return hash(self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return self.name == other.name
