"""Version planning, manifest rewriting and changelogs."""

from monopub.versioning.changelog import generate_changelog_entry, prepend_to_changelog
from monopub.versioning.planner import (
    ExplicitVersion,
    IncrementKind,
    VersionDirective,
    increment,
    parse_increment,
    parse_version,
    plan_version,
    resolve_directive,
)
from monopub.versioning.rewrite import (
    BumpPolicy,
    ManifestUpdate,
    rewrite_manifests,
    rewrite_requirement,
)

__all__ = [
    "BumpPolicy",
    "ExplicitVersion",
    "IncrementKind",
    "ManifestUpdate",
    "VersionDirective",
    "generate_changelog_entry",
    "increment",
    "parse_increment",
    "parse_version",
    "plan_version",
    "prepend_to_changelog",
    "resolve_directive",
    "rewrite_manifests",
    "rewrite_requirement",
]
