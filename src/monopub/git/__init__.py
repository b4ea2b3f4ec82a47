"""Git integration."""

from monopub.git.client import GitClient
from monopub.git.diff import (
    changed_since,
    get_commit_subjects,
    get_uncommitted_changes,
    get_unpulled_changes,
    has_upstream,
)
from monopub.git.repo import (
    add_tag,
    commit_changes,
    get_current_branch,
    get_current_commit,
    push_with_tags,
    ref_exists,
    run_git_command,
)

__all__ = [
    "GitClient",
    "add_tag",
    "changed_since",
    "commit_changes",
    "get_commit_subjects",
    "get_current_branch",
    "get_current_commit",
    "get_uncommitted_changes",
    "get_unpulled_changes",
    "has_upstream",
    "push_with_tags",
    "ref_exists",
    "run_git_command",
]
