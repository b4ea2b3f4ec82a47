"""New version computation.

One version is computed per invocation and applied to every dirty package.
Increments follow npm's semver rules; parsing, comparison and the plain
component bumps come from the ``semver`` library.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import semver

from monopub.errors import InvalidIncrementError, InvalidVersionError


class IncrementKind(str, Enum):
    """Supported ``--increment-version-by`` values."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PREMAJOR = "premajor"
    PREMINOR = "preminor"
    PREPATCH = "prepatch"
    PRERELEASE = "prerelease"
    ALPHA = "alpha"
    BETA = "beta"
    RC = "rc"

    @property
    def is_preset(self) -> bool:
        """Named prerelease track (alpha, beta, rc)."""
        return self in (IncrementKind.ALPHA, IncrementKind.BETA, IncrementKind.RC)


@dataclass(frozen=True)
class ExplicitVersion:
    """A version given verbatim by the user."""

    version: str


VersionDirective = ExplicitVersion | IncrementKind


def parse_version(value: str) -> semver.Version:
    """Parse a semver string.

    Raises:
        InvalidVersionError: If ``value`` is not valid semver.
    """
    try:
        return semver.Version.parse(value)
    except (TypeError, ValueError) as e:
        raise InvalidVersionError(str(value)) from e


def parse_increment(value: str) -> IncrementKind:
    """Parse an increment directive.

    Raises:
        InvalidIncrementError: If ``value`` is not a known increment kind.
    """
    try:
        return IncrementKind(value)
    except ValueError as e:
        raise InvalidIncrementError(value, [k.value for k in IncrementKind]) from e


def resolve_directive(
    new_version: str | None = None,
    increment_by: str | None = None,
) -> VersionDirective:
    """Pick the directive for an invocation.

    The increment is validated even when an explicit version is given; the
    explicit version wins. With neither, the directive is a patch bump.

    Raises:
        InvalidIncrementError: Unknown increment.
        InvalidVersionError: Explicit version is not valid semver.
    """
    kind = parse_increment(increment_by) if increment_by is not None else IncrementKind.PATCH
    if new_version is not None:
        parse_version(new_version)
        return ExplicitVersion(new_version)
    return kind


def _start(preid: str | None) -> str:
    return f"{preid}.0" if preid else "0"


def _next_counter(prerelease: str) -> str:
    # 1.0.0-rc.1 -> rc.2, 1.0.0-alpha -> alpha.0
    parts = prerelease.split(".")
    if parts[-1].isdigit():
        parts[-1] = str(int(parts[-1]) + 1)
    else:
        parts.append("0")
    return ".".join(parts)


def increment(version: semver.Version, kind: IncrementKind) -> semver.Version:
    """Apply one increment to a version.

    Examples:
        0.8.2 + patch -> 0.8.3
        0.8.2 + minor -> 0.9.0
        0.8.2 + rc -> 1.0.0-rc.0
        1.0.0-rc.0 + rc -> 1.0.0-rc.1
        1.0.0-rc.3 + major -> 1.0.0
    """
    pre = version.prerelease
    released = version.replace(prerelease=None, build=None)

    if kind is IncrementKind.MAJOR:
        if pre and version.minor == 0 and version.patch == 0:
            return released
        return version.bump_major()

    if kind is IncrementKind.MINOR:
        if pre and version.patch == 0:
            return released
        return version.bump_minor()

    if kind is IncrementKind.PATCH:
        if pre:
            return released
        return version.bump_patch()

    if kind is IncrementKind.PREMAJOR:
        return version.bump_major().replace(prerelease=_start(None))

    if kind is IncrementKind.PREMINOR:
        return version.bump_minor().replace(prerelease=_start(None))

    if kind is IncrementKind.PREPATCH:
        return version.bump_patch().replace(prerelease=_start(None))

    if kind is IncrementKind.PRERELEASE:
        if pre:
            return version.replace(prerelease=_next_counter(pre), build=None)
        return version.bump_patch().replace(prerelease=_start(None))

    # Named tracks: leaving a stable release starts the next major's track.
    if not pre:
        return version.bump_major().replace(prerelease=_start(kind.value))
    if pre.split(".")[0] == kind.value:
        return version.replace(prerelease=_next_counter(pre), build=None)
    return released.replace(prerelease=_start(kind.value))


def plan_version(baseline: str, directive: VersionDirective) -> str:
    """Compute the version every dirty package is bumped to.

    Args:
        baseline: Version the increment starts from.
        directive: Explicit version or increment kind.

    Returns:
        The new version string.

    Raises:
        InvalidVersionError: If the explicit version or the baseline is invalid.
    """
    if isinstance(directive, ExplicitVersion):
        parse_version(directive.version)
        return directive.version

    return str(increment(parse_version(baseline), directive))
