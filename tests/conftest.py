"""Shared test fixtures for monopub tests."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

# Load .env from project root (doesn't override existing env vars)
load_dotenv(Path(__file__).parent.parent / ".env")


def write_manifest(path: Path, manifest: dict[str, Any]) -> None:
    path.mkdir(parents=True, exist_ok=True)
    (path / "package.json").write_text(json.dumps(manifest, indent=2) + "\n")


def read_manifest(path: Path) -> dict[str, Any]:
    return json.loads((path / "package.json").read_text())


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_monopub_yaml() -> str:
    """Sample monopub.yaml content."""
    return """\
name: test-workspace
packages:
  - packages/*

versioning:
  tag_format: "v{version}"
  commit_message: "v{version}"
  bump_dependent_reqs: range

publish:
  command: npm publish
  concurrency: 1
"""


@pytest.fixture
def workspace_dir(temp_dir: Path, sample_monopub_yaml: str) -> Path:
    """Create a sample workspace with five packages.

    oao <- oao-b <- oao-c <- oao-d, and oao-priv (private) depending on all
    of them. oao-b, oao-c and oao-d also depend on oao directly.
    """
    (temp_dir / "monopub.yaml").write_text(sample_monopub_yaml)
    write_manifest(temp_dir, {"name": "oao-root", "version": "0.8.2", "private": True})

    packages = temp_dir / "packages"
    write_manifest(
        packages / "oao",
        {
            "name": "oao",
            "version": "0.8.2",
            "dependencies": {"timm": "1.x"},
            "scripts": {"build": "echo build-oao", "test": "echo test-oao"},
        },
    )
    write_manifest(
        packages / "oao-b",
        {
            "name": "oao-b",
            "version": "0.8.2",
            "dependencies": {"oao": "^0.8.2", "timm": "1.x"},
            "scripts": {"build": "echo build-b"},
        },
    )
    write_manifest(
        packages / "oao-c",
        {
            "name": "oao-c",
            "version": "0.8.2",
            "dependencies": {"oao": "^0.8.2", "timm": "1.x"},
            "devDependencies": {"oao-b": "^0.8.2", "xxl": "1.x"},
            "scripts": {"test": "echo test-c"},
        },
    )
    write_manifest(
        packages / "oao-d",
        {
            "name": "oao-d",
            "version": "0.8.2",
            "dependencies": {"oao": "^0.8.2", "timm": "1.x"},
            "devDependencies": {"oao-b": "^0.8.2", "oao-c": "^0.8.2", "xxl": "1.x"},
        },
    )
    write_manifest(
        packages / "oao-priv",
        {
            "name": "oao-priv",
            "version": "0.8.2",
            "private": True,
            "dependencies": {"oao": "^0.8.2", "timm": "1.x"},
            "devDependencies": {"oao-b": "^0.8.2", "oao-c": "^0.8.2", "xxl": "1.x"},
        },
    )
    return temp_dir


@pytest.fixture
def git_workspace(workspace_dir: Path) -> Path:
    """Create a workspace with git initialized on master."""
    os.system(f"cd {workspace_dir} && git init -q")
    os.system(f"cd {workspace_dir} && git symbolic-ref HEAD refs/heads/master")
    os.system(f"cd {workspace_dir} && git config user.email 'test@test.com'")
    os.system(f"cd {workspace_dir} && git config user.name 'Test'")
    os.system(f"cd {workspace_dir} && git config commit.gpgsign false")
    os.system(f"cd {workspace_dir} && git config tag.gpgsign false")
    os.system(f"cd {workspace_dir} && git add -A")
    os.system(f"cd {workspace_dir} && git commit -q -m 'Initial commit'")
    return workspace_dir
