"""Manifest rewriting for a version bump."""

from __future__ import annotations

import copy
import re
from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from monopub.workspace.package import Package

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")

_OPERATOR = re.compile(r"^(\^|~|>=|<=|>|<|=)")


class BumpPolicy(str, Enum):
    """How requirements on a bumped package are rewritten.

    ``no`` relaxes the requirement to ``*`` instead of leaving the stale
    pinned string behind.
    """

    EXACT = "exact"
    RANGE = "range"
    NO = "no"


def rewrite_requirement(current: str, new_version: str, policy: BumpPolicy) -> str:
    """Rewrite one requirement string.

    Examples:
        ("^0.8.2", "1.0.0", RANGE) -> "^1.0.0"
        ("^0.8.2", "1.0.0", EXACT) -> "1.0.0"
        ("^0.8.2", "1.0.0", NO) -> "*"
    """
    if policy is BumpPolicy.EXACT:
        return new_version
    if policy is BumpPolicy.NO:
        return "*"

    match = _OPERATOR.match(current.strip())
    operator = match.group(1) if match else ""
    return f"{operator}{new_version}"


@dataclass
class ManifestUpdate:
    """A manifest that changed as part of a bump.

    Attributes:
        package: Package the manifest belongs to.
        manifest: The rewritten manifest (a copy).
        version_changed: True if ``version`` was set.
        rewritten: ``(section, dependency)`` pairs whose requirement changed.
    """

    package: Package
    manifest: dict[str, Any]
    version_changed: bool = False
    rewritten: list[tuple[str, str]] = field(default_factory=list)


def _rewrite_one(
    package: Package,
    bump_version: bool,
    dirty_names: Collection[str],
    new_version: str,
    policy: BumpPolicy,
) -> ManifestUpdate | None:
    manifest = copy.deepcopy(package.manifest)
    update = ManifestUpdate(package=package, manifest=manifest)

    if bump_version:
        manifest["version"] = new_version
        update.version_changed = True

    for section in DEPENDENCY_SECTIONS:
        requirements = manifest.get(section)
        if not isinstance(requirements, dict):
            continue
        for name, requirement in requirements.items():
            if name not in dirty_names:
                continue
            rewritten = rewrite_requirement(str(requirement), new_version, policy)
            if rewritten != requirement:
                requirements[name] = rewritten
                update.rewritten.append((section, name))

    if update.version_changed or update.rewritten:
        return update
    return None


def rewrite_manifests(
    packages: Iterable[Package],
    dirty: Iterable[Package],
    new_version: str,
    policy: BumpPolicy,
    *,
    root: Package | None = None,
) -> list[ManifestUpdate]:
    """Compute the manifests touched by bumping ``dirty`` to ``new_version``.

    Dirty packages get the new version. Every package (dirty or not) gets
    its requirements on dirty packages rewritten per ``policy``; all other
    requirements are left alone. The root manifest, when given, always
    takes the new version. Nothing is written to disk.

    Returns:
        Updates in order: root first, then discovery order.
    """
    dirty_names = {p.name for p in dirty}
    updates: list[ManifestUpdate] = []

    if root is not None:
        update = _rewrite_one(root, True, dirty_names, new_version, policy)
        if update:
            updates.append(update)

    for pkg in packages:
        update = _rewrite_one(pkg, pkg.name in dirty_names, dirty_names, new_version, policy)
        if update:
            updates.append(update)

    return updates
