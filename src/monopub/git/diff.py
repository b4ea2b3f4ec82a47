"""Git diff operations."""

from __future__ import annotations

from pathlib import Path

from monopub.git.repo import run_git_command


def get_uncommitted_changes(cwd: Path | None = None) -> str:
    """Porcelain status of the working tree (empty when clean)."""
    result = run_git_command(["status", "--porcelain"], cwd=cwd)
    return result.stdout.strip()


def has_upstream(cwd: Path | None = None) -> bool:
    """Check whether the current branch tracks a remote branch."""
    result = run_git_command(
        ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"],
        cwd=cwd,
        check=False,
    )
    return result.returncode == 0


def get_unpulled_changes(cwd: Path | None = None, *, fetch: bool = True) -> str:
    """Changes on the upstream branch that HEAD does not have yet.

    Args:
        cwd: Working directory.
        fetch: Fetch from the remote first.

    Returns:
        ``git log`` lines of the missing commits, or an empty string when
        there are none or the branch has no upstream.
    """
    if not has_upstream(cwd):
        return ""
    if fetch:
        run_git_command(["fetch", "--quiet"], cwd=cwd)
    result = run_git_command(["log", "--oneline", "HEAD..@{u}"], cwd=cwd)
    return result.stdout.strip()


def changed_since(root: Path, since: str, package_path: Path) -> str:
    """Names of files changed within a package since a git reference.

    Covers commits since ``since`` plus staged and unstaged edits.

    Args:
        root: Repository root.
        since: Git reference.
        package_path: Absolute path to package.

    Returns:
        Newline separated relative paths (empty if nothing changed).
    """
    files: set[str] = set()
    package_path_str = str(package_path)

    # Commits
    result = run_git_command(
        ["diff", "--name-only", f"{since}...HEAD", "--", package_path_str],
        cwd=root,
    )
    files.update(result.stdout.strip().splitlines())

    # Working tree against HEAD (staged and unstaged)
    result = run_git_command(
        ["diff", "--name-only", "HEAD", "--", package_path_str],
        cwd=root,
    )
    files.update(result.stdout.strip().splitlines())

    return "\n".join(sorted(f for f in files if f))


def get_commit_subjects(root: Path, since: str | None = None) -> list[str]:
    """Subjects of commits since a reference (all commits when None)."""
    revision = f"{since}..HEAD" if since else "HEAD"
    result = run_git_command(["log", "--pretty=format:%s", revision], cwd=root, check=False)
    if result.returncode != 0:
        return []
    return [line for line in result.stdout.splitlines() if line]
