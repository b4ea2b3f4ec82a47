"""Workspace discovery and package graph."""

from monopub.workspace.graph import DependencyGraph
from monopub.workspace.package import MANIFEST_NAME, Package
from monopub.workspace.store import ManifestStore
from monopub.workspace.workspace import Workspace

__all__ = [
    "MANIFEST_NAME",
    "DependencyGraph",
    "ManifestStore",
    "Package",
    "Workspace",
]
