"""Changelog generation."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from pathlib import Path

CHANGELOG_HEADER = "# Changelog\n\n"


def generate_changelog_entry(
    version: str,
    packages: Sequence[str],
    commits: Sequence[str] = (),
    *,
    release_date: date | None = None,
) -> str:
    """Render the changelog entry for one release.

    Args:
        version: Released version.
        packages: Names of the bumped packages.
        commits: Commit subjects included in the release.
        release_date: Release date (default: today).
    """
    day = (release_date or date.today()).isoformat()
    lines = [f"## {version} ({day})", ""]

    if commits:
        lines.extend(f"- {subject}" for subject in commits)
        lines.append("")

    lines.append(f"Packages: {', '.join(packages)}" if packages else "Packages: none")
    lines.append("")
    return "\n".join(lines) + "\n"


def prepend_to_changelog(path: Path, entry: str) -> None:
    """Insert ``entry`` at the top of a changelog, below its title."""
    if path.exists():
        content = path.read_text(encoding="utf-8")
        if content.startswith(CHANGELOG_HEADER):
            content = content[len(CHANGELOG_HEADER) :]
    else:
        content = ""

    path.write_text(CHANGELOG_HEADER + entry + content, encoding="utf-8")
