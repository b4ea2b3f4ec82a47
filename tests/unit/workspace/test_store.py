"""Tests for ManifestStore."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from monopub.errors import ConfigurationError
from monopub.workspace import ManifestStore


def make_package(path: Path, name: str, **extra: object) -> None:
    path.mkdir(parents=True, exist_ok=True)
    (path / "package.json").write_text(json.dumps({"name": name, "version": "1.0.0", **extra}))


class TestDiscover:
    def test_discovery_order(self, workspace_dir: Path) -> None:
        store = ManifestStore(workspace_dir)
        names = [p.name for p in store.discover(["packages/*"])]
        assert names == ["oao", "oao-b", "oao-c", "oao-d", "oao-priv"]

    def test_patterns_visited_in_order(self, temp_dir: Path) -> None:
        make_package(temp_dir / "tools" / "cli", "cli")
        make_package(temp_dir / "packages" / "core", "core")
        store = ManifestStore(temp_dir)
        names = [p.name for p in store.discover(["tools/*", "packages/*"])]
        assert names == ["cli", "core"]

    def test_directories_without_manifest_skipped(self, temp_dir: Path) -> None:
        make_package(temp_dir / "packages" / "a", "a")
        (temp_dir / "packages" / "docs").mkdir()
        (temp_dir / "packages" / "README.md").write_text("readme")
        store = ManifestStore(temp_dir)
        assert [p.name for p in store.discover(["packages/*"])] == ["a"]

    def test_overlapping_patterns_deduplicated(self, temp_dir: Path) -> None:
        make_package(temp_dir / "packages" / "a", "a")
        store = ManifestStore(temp_dir)
        assert len(store.discover(["packages/*", "packages/a"])) == 1

    def test_ignore(self, workspace_dir: Path) -> None:
        store = ManifestStore(workspace_dir)
        packages = store.discover(["packages/*"], ignore=["packages/oao-priv", "*/oao-d"])
        assert [p.name for p in packages] == ["oao", "oao-b", "oao-c"]

    def test_duplicate_names(self, temp_dir: Path) -> None:
        make_package(temp_dir / "packages" / "a", "same")
        make_package(temp_dir / "packages" / "b", "same")
        with pytest.raises(ConfigurationError, match="Duplicate package name 'same'"):
            ManifestStore(temp_dir).discover(["packages/*"])

    def test_absolute_pattern_inside_root(self, workspace_dir: Path) -> None:
        store = ManifestStore(workspace_dir)
        packages = store.discover([str(workspace_dir / "packages" / "*")])
        assert [p.name for p in packages] == ["oao", "oao-b", "oao-c", "oao-d", "oao-priv"]

    def test_absolute_pattern_outside_root(self, temp_dir: Path) -> None:
        make_package(temp_dir / "ws" / "packages" / "a", "a")
        make_package(temp_dir / "elsewhere" / "b", "b")
        store = ManifestStore(temp_dir / "ws")
        with pytest.raises(ConfigurationError, match="outside the workspace root"):
            store.discover([str(temp_dir / "elsewhere" / "*")])


class TestRoot:
    def test_load_root(self, workspace_dir: Path) -> None:
        root = ManifestStore(workspace_dir).load_root()
        assert root is not None
        assert root.name == "oao-root"
        assert root.version == "0.8.2"

    def test_no_root_manifest(self, temp_dir: Path) -> None:
        assert ManifestStore(temp_dir).load_root() is None


class TestWrite:
    def test_write_preserves_key_order(self, temp_dir: Path) -> None:
        store = ManifestStore(temp_dir)
        manifest = {"version": "1.0.0", "name": "z", "description": "ünïcode"}
        store.write(temp_dir, manifest)

        content = (temp_dir / "package.json").read_text(encoding="utf-8")
        assert content.endswith("}\n")
        assert list(json.loads(content)) == ["version", "name", "description"]
        assert "ünïcode" in content
        assert '  "version": "1.0.0"' in content
