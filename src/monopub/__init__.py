"""monopub - publish engine for JavaScript monorepos.

Provides:
- Workspace discovery from package.json manifests
- Dependency graph and dirty-set resolution against the last release tag
- One shared semver bump for every dirty package
- Manifest rewriting, git commit/tag/push and ordered registry publishing
"""

from monopub.config import MonoPubConfig, load_config
from monopub.errors import (
    BranchCheckError,
    ConfigurationError,
    CyclicDependencyError,
    GitError,
    InvalidIncrementError,
    InvalidVersionError,
    MonoPubError,
    PackageNotFoundError,
    PublishError,
    ScriptNotFoundError,
    UncommittedCheckError,
    UnpulledCheckError,
    WorkspaceNotFoundError,
)
from monopub.execution import (
    BatchResult,
    ExecutionResult,
    ExecutionStatus,
    ParallelExecutor,
)
from monopub.workspace import DependencyGraph, Package, Workspace

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "Workspace",
    "Package",
    "DependencyGraph",
    "MonoPubConfig",
    "load_config",
    # Execution
    "ExecutionResult",
    "ExecutionStatus",
    "BatchResult",
    "ParallelExecutor",
    # Errors
    "MonoPubError",
    "ConfigurationError",
    "WorkspaceNotFoundError",
    "PackageNotFoundError",
    "CyclicDependencyError",
    "ScriptNotFoundError",
    "GitError",
    "BranchCheckError",
    "UncommittedCheckError",
    "UnpulledCheckError",
    "InvalidIncrementError",
    "InvalidVersionError",
    "PublishError",
]
