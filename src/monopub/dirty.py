"""Dirty-set resolution.

A package is dirty when it changed since the last release, or when any
package it depends on (directly or through other local packages) is dirty.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from monopub.git import GitClient
    from monopub.workspace import DependencyGraph, Package

logger = logging.getLogger(__name__)

ChangeProbe = Callable[["Package"], bool]


def resolve_dirty(graph: DependencyGraph, is_changed: ChangeProbe) -> list[Package]:
    """Compute the dirty closure.

    Args:
        graph: Dependency graph of the workspace.
        is_changed: Returns True for packages that changed directly.

    Returns:
        Dirty packages in discovery order (possibly empty).
    """
    dirty = {name for name, pkg in graph.packages.items() if is_changed(pkg)}

    # Propagate to dependents until nothing new is added.
    frontier = list(dirty)
    while frontier:
        name = frontier.pop()
        for dependent in graph.get_dependents(name):
            if dependent.name not in dirty:
                dirty.add(dependent.name)
                frontier.append(dependent.name)

    return [pkg for name, pkg in graph.packages.items() if name in dirty]


def git_change_probe(git: GitClient, ref: str) -> ChangeProbe:
    """Build a change probe that diffs each package against ``ref``.

    When ``ref`` does not exist (nothing released yet) every package counts
    as changed.
    """
    if not git.ref_exists(ref):
        logger.warning("Reference %s not found; treating every package as changed", ref)
        return lambda pkg: True

    def probe(pkg: Package) -> bool:
        changes = git.changed_since(ref, pkg.path)
        if changes:
            logger.debug("%s changed since %s:\n%s", pkg.name, ref, changes)
        return bool(changes)

    return probe
