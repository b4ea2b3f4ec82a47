"""End-to-end publish against a real git repository and remote."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from monopub.commands.publish import PublishOptions, publish
from monopub.errors import BranchCheckError, UncommittedCheckError, UnpulledCheckError
from monopub.workspace import Workspace


def run_git(args: list[str], cwd: Path) -> str:
    result = subprocess.run(["git"] + args, cwd=cwd, capture_output=True, text=True, check=True)
    return result.stdout.strip()


def read(path: Path) -> dict:
    return json.loads((path / "package.json").read_text())


@pytest.fixture
def released_workspace(git_workspace: Path, tmp_path: Path) -> Path:
    """Workspace released as v0.8.2, pushed to a bare remote, then oao-c changed."""
    remote = tmp_path / "remote.git"
    run_git(["init", "-q", "--bare", str(remote)], git_workspace)
    run_git(["remote", "add", "origin", str(remote)], git_workspace)
    run_git(["tag", "-a", "v0.8.2", "-m", "v0.8.2"], git_workspace)
    run_git(["push", "-q", "-u", "origin", "master", "--tags"], git_workspace)

    (git_workspace / "packages" / "oao-c" / "index.js").write_text("module.exports = 'c';\n")
    run_git(["add", "-A"], git_workspace)
    run_git(["commit", "-q", "-m", "Improve oao-c"], git_workspace)
    return git_workspace


@pytest.fixture
def workspace(released_workspace: Path) -> Workspace:
    workspace = Workspace.discover(released_workspace)
    workspace.config.publish.command = "echo publishing $MONOPUB_PACKAGE_NAME"
    return workspace


async def test_publish_dirty_packages(released_workspace: Path, workspace: Workspace) -> None:
    options = PublishOptions(increment_version_by="minor", changelog=True)

    result = await publish(workspace, options)

    assert [p.name for p in result.dirty] == ["oao-c", "oao-d", "oao-priv"]
    assert result.new_version == "0.9.0"

    packages = released_workspace / "packages"
    assert read(released_workspace)["version"] == "0.9.0"
    assert read(packages / "oao")["version"] == "0.8.2"
    assert read(packages / "oao-c")["version"] == "0.9.0"
    assert read(packages / "oao-d")["devDependencies"]["oao-c"] == "^0.9.0"
    assert read(packages / "oao-d")["devDependencies"]["oao-b"] == "^0.8.2"

    changelog = (released_workspace / "CHANGELOG.md").read_text()
    assert "## 0.9.0" in changelog
    assert "- Improve oao-c" in changelog

    assert run_git(["log", "-1", "--pretty=format:%s"], released_workspace) == "v0.9.0"
    assert run_git(["status", "--porcelain"], released_workspace) == ""
    assert run_git(["ls-remote", "--tags", "origin", "v0.9.0"], released_workspace)

    assert result.report is not None
    assert result.report.published == ["oao-c", "oao-d"]
    assert result.report.skipped == ["oao-priv"]
    assert result.report.get("oao-c").stdout.strip() == "publishing oao-c"


async def test_second_run_has_nothing_to_publish(workspace: Workspace) -> None:
    await publish(workspace, PublishOptions())

    again = await publish(Workspace.discover(workspace.root), PublishOptions())

    assert again.nothing_to_publish
    assert again.report is None


async def test_failed_publish_halts(workspace: Workspace) -> None:
    workspace.config.publish.command = '[ "$MONOPUB_PACKAGE_NAME" != "oao-c" ]'

    result = await publish(workspace, PublishOptions())

    assert not result.success
    assert result.report.failed == ["oao-c"]
    assert result.report.not_reached == ["oao-d"]
    assert result.tag == "v0.8.3"


async def test_uncommitted_changes_block(released_workspace: Path, workspace: Workspace) -> None:
    (released_workspace / "packages" / "oao" / "index.js").write_text("wip\n")

    with pytest.raises(UncommittedCheckError):
        await publish(workspace, PublishOptions())


async def test_unpulled_changes_block(
    released_workspace: Path, workspace: Workspace, tmp_path: Path
) -> None:
    clone = tmp_path / "clone"
    remote = run_git(["remote", "get-url", "origin"], released_workspace)
    run_git(["clone", "-q", "-b", "master", remote, str(clone)], released_workspace)
    run_git(["config", "user.email", "other@test.com"], clone)
    run_git(["config", "user.name", "Other"], clone)
    run_git(["config", "commit.gpgsign", "false"], clone)
    run_git(["commit", "-q", "--allow-empty", "-m", "Remote work"], clone)
    run_git(["push", "-q", "origin", "master"], clone)

    with pytest.raises(UnpulledCheckError) as exc_info:
        await publish(workspace, PublishOptions())
    assert "Remote work" in exc_info.value.diff


async def test_wrong_branch_blocks(released_workspace: Path, workspace: Workspace) -> None:
    run_git(["checkout", "-q", "-b", "feature"], released_workspace)

    with pytest.raises(BranchCheckError):
        await publish(workspace, PublishOptions())
