"""Test git diff utilities."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from monopub.git.diff import (
    changed_since,
    get_commit_subjects,
    get_uncommitted_changes,
    get_unpulled_changes,
    has_upstream,
)


def test_get_uncommitted_changes():
    with patch("monopub.git.diff.run_git_command") as mock_run:
        mock_run.return_value = MagicMock(stdout=" M packages/oao/index.js\n")
        assert get_uncommitted_changes() == "M packages/oao/index.js"


def test_has_upstream():
    with patch("monopub.git.diff.run_git_command") as mock_run:
        mock_run.return_value = MagicMock(returncode=0)
        assert has_upstream() is True
        mock_run.return_value = MagicMock(returncode=128)
        assert has_upstream() is False


def test_unpulled_without_upstream():
    with patch("monopub.git.diff.run_git_command") as mock_run:
        mock_run.return_value = MagicMock(returncode=128, stdout="")
        assert get_unpulled_changes() == ""
        assert mock_run.call_count == 1


def test_unpulled_fetches_then_logs():
    with patch("monopub.git.diff.run_git_command") as mock_run:
        mock_run.side_effect = [
            MagicMock(returncode=0),
            MagicMock(returncode=0, stdout=""),
            MagicMock(returncode=0, stdout="abc123 Remote change\n"),
        ]
        assert get_unpulled_changes() == "abc123 Remote change"
        commands = [c.args[0] for c in mock_run.call_args_list]
        assert commands[1] == ["fetch", "--quiet"]
        assert commands[2] == ["log", "--oneline", "HEAD..@{u}"]


def test_unpulled_no_fetch():
    with patch("monopub.git.diff.run_git_command") as mock_run:
        mock_run.side_effect = [
            MagicMock(returncode=0),
            MagicMock(returncode=0, stdout=""),
        ]
        assert get_unpulled_changes(fetch=False) == ""
        assert mock_run.call_count == 2


def test_changed_since_merges_commits_and_worktree():
    with patch("monopub.git.diff.run_git_command") as mock_run:
        mock_run.side_effect = [
            MagicMock(stdout="packages/oao/a.js\npackages/oao/b.js\n"),
            MagicMock(stdout="packages/oao/b.js\npackages/oao/c.js\n"),
        ]
        result = changed_since(Path("/repo"), "v1.0.0", Path("/repo/packages/oao"))

        assert result.splitlines() == [
            "packages/oao/a.js",
            "packages/oao/b.js",
            "packages/oao/c.js",
        ]
        first = mock_run.call_args_list[0].args[0]
        assert first == ["diff", "--name-only", "v1.0.0...HEAD", "--", "/repo/packages/oao"]


def test_changed_since_nothing():
    with patch("monopub.git.diff.run_git_command") as mock_run:
        mock_run.return_value = MagicMock(stdout="")
        assert changed_since(Path("/repo"), "v1.0.0", Path("/repo/packages/oao")) == ""


def test_get_commit_subjects():
    with patch("monopub.git.diff.run_git_command") as mock_run:
        mock_run.return_value = MagicMock(returncode=0, stdout="Fix a\nAdd b\n")
        assert get_commit_subjects(Path("/repo"), "v1.0.0") == ["Fix a", "Add b"]
        assert mock_run.call_args[0][0] == ["log", "--pretty=format:%s", "v1.0.0..HEAD"]

        get_commit_subjects(Path("/repo"))
        assert mock_run.call_args[0][0] == ["log", "--pretty=format:%s", "HEAD"]

        mock_run.return_value = MagicMock(returncode=128, stdout="")
        assert get_commit_subjects(Path("/repo")) == []
