"""monopub exception hierarchy.

Every error carries a stable ``code`` so callers (and tests) can tell
failures apart without matching on message text.
"""

from __future__ import annotations


class MonoPubError(Exception):
    """Base class for all monopub errors.

    Attributes:
        message: Human readable description.
        code: Stable machine readable error code.
    """

    code = "MONOPUB_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(MonoPubError):
    """Invalid configuration or manifest."""

    code = "CONFIGURATION_ERROR"


class WorkspaceNotFoundError(MonoPubError):
    """No workspace root could be located."""

    code = "WORKSPACE_NOT_FOUND"

    def __init__(self, path: str) -> None:
        super().__init__(f"No monopub workspace found at or above {path}")
        self.path = path


class PackageNotFoundError(MonoPubError):
    """A package name is not part of the workspace."""

    code = "PACKAGE_NOT_FOUND"

    def __init__(self, name: str) -> None:
        super().__init__(f"Package '{name}' not found in workspace")
        self.name = name


class CyclicDependencyError(MonoPubError):
    """Local packages depend on each other in a cycle."""

    code = "CYCLIC_DEPENDENCY"

    def __init__(self, cycle: list[str]) -> None:
        super().__init__(f"Cyclic dependency detected: {' -> '.join(cycle)}")
        self.cycle = cycle


class GitError(MonoPubError):
    """A git command failed."""

    code = "GIT_ERROR"

    def __init__(self, message: str, command: str | None = None) -> None:
        super().__init__(message)
        self.command = command

    def __str__(self) -> str:
        if self.command:
            return f"{self.message} (command: {self.command})"
        return self.message


class BranchCheckError(MonoPubError):
    """Publishing from a branch other than master/main."""

    code = "BRANCH_CHECK_FAILED"

    def __init__(self, branch: str) -> None:
        super().__init__(f"Can't publish from current branch '{branch}' (expected master or main)")
        self.branch = branch


class UncommittedCheckError(MonoPubError):
    """The working tree has uncommitted changes."""

    code = "UNCOMMITTED_CHECK_FAILED"

    def __init__(self, diff: str) -> None:
        super().__init__(f"Can't publish with uncommitted changes:\n{diff}")
        self.diff = diff


class UnpulledCheckError(MonoPubError):
    """The remote has changes that are not pulled yet."""

    code = "UNPULLED_CHECK_FAILED"

    def __init__(self, diff: str) -> None:
        super().__init__(f"Can't publish with unpulled changes:\n{diff}")
        self.diff = diff


class InvalidIncrementError(MonoPubError):
    """Unknown increment directive."""

    code = "INVALID_INCREMENT_BY_VALUE"

    def __init__(self, value: str, allowed: list[str]) -> None:
        super().__init__(f"Invalid increment '{value}'. Allowed: {', '.join(allowed)}")
        self.value = value
        self.allowed = allowed


class InvalidVersionError(MonoPubError):
    """A version string is not valid semver."""

    code = "INVALID_VERSION"

    def __init__(self, version: str) -> None:
        super().__init__(f"Invalid version '{version}'")
        self.version = version


class PublishError(MonoPubError):
    """The registry publish command failed for a package."""

    code = "PUBLISH_FAILED"

    def __init__(self, package: str, output: str) -> None:
        super().__init__(f"Failed to publish {package}: {output}")
        self.package = package
        self.output = output


class ScriptNotFoundError(MonoPubError):
    """No package defines a script matching the requested pattern."""

    code = "SCRIPT_NOT_FOUND"

    def __init__(self, pattern: str) -> None:
        super().__init__(f"No package script matches '{pattern}'")
        self.pattern = pattern
