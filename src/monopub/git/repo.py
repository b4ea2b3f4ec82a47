"""Git repository abstraction."""

from __future__ import annotations

import subprocess
from pathlib import Path

from monopub.errors import GitError


def run_git_command(
    args: list[str],
    cwd: Path | None = None,
    *,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run a git command synchronously.

    Args:
        args: Git command arguments (without 'git').
        cwd: Working directory.
        check: Raise on non-zero exit code.

    Returns:
        Completed process result.

    Raises:
        GitError: If command fails and check is True.
    """
    cmd = ["git"] + args

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if check and result.returncode != 0:
            raise GitError(
                result.stderr.strip() or f"Command failed with exit code {result.returncode}",
                command=" ".join(cmd),
            )
        return result
    except FileNotFoundError as e:
        raise GitError("Git is not installed") from e


def get_current_branch(cwd: Path | None = None) -> str:
    """Get the current git branch name."""
    result = run_git_command(["rev-parse", "--abbrev-ref", "HEAD"], cwd=cwd)
    return result.stdout.strip()


def get_current_commit(cwd: Path | None = None) -> str:
    """Get the current commit SHA."""
    result = run_git_command(["rev-parse", "HEAD"], cwd=cwd)
    return result.stdout.strip()


def ref_exists(ref: str, cwd: Path | None = None) -> bool:
    """Check whether a tag, branch or commit exists."""
    result = run_git_command(
        ["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"],
        cwd=cwd,
        check=False,
    )
    return result.returncode == 0


def commit_changes(message: str, cwd: Path | None = None) -> str:
    """Stage everything and commit it.

    Returns:
        SHA of the new commit.
    """
    run_git_command(["add", "-A"], cwd=cwd)
    run_git_command(["commit", "-m", message], cwd=cwd)
    return get_current_commit(cwd)


def add_tag(tag: str, message: str | None = None, cwd: Path | None = None) -> None:
    """Create an annotated tag on HEAD."""
    run_git_command(["tag", "-a", tag, "-m", message or tag], cwd=cwd)


def push_with_tags(cwd: Path | None = None) -> None:
    """Push the current branch together with its tags."""
    run_git_command(["push"], cwd=cwd)
    run_git_command(["push", "--tags"], cwd=cwd)
