"""Git collaborator bound to one repository."""

from __future__ import annotations

from pathlib import Path

from monopub.git import diff, repo


class GitClient:
    """Git operations the publish pipeline needs, bound to a root directory.

    The pipeline only talks to git through this object, so tests can hand
    it a fake with the same methods.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def current_branch(self) -> str:
        return repo.get_current_branch(self.root)

    def uncommitted_changes(self) -> str:
        return diff.get_uncommitted_changes(self.root)

    def unpulled_changes(self) -> str:
        return diff.get_unpulled_changes(self.root)

    def ref_exists(self, ref: str) -> bool:
        return repo.ref_exists(ref, self.root)

    def changed_since(self, ref: str, package_path: Path) -> str:
        return diff.changed_since(self.root, ref, package_path)

    def commit_subjects(self, since: str | None) -> list[str]:
        return diff.get_commit_subjects(self.root, since)

    def commit_changes(self, message: str) -> str:
        return repo.commit_changes(message, self.root)

    def add_tag(self, tag: str, message: str | None = None) -> None:
        repo.add_tag(tag, message, self.root)

    def push_with_tags(self) -> None:
        repo.push_with_tags(self.root)
