"""Base command infrastructure."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from monopub.git import GitClient
from monopub.workspace import Workspace

TResult = TypeVar("TResult")


@dataclass
class CommandContext:
    """Context passed to all commands.

    Attributes:
        workspace: The workspace instance.
        dry_run: If True, show what would happen without making changes.
        env: Extra environment for commands run in packages.
        git: Git collaborator (default: a GitClient on the workspace root).
    """

    workspace: Workspace
    dry_run: bool = False
    env: dict[str, str] = field(default_factory=dict)
    git: GitClient | None = None


class Command(ABC, Generic[TResult]):
    """Base class for async monopub commands.

    Commands receive a context and return a result.
    """

    def __init__(self, context: CommandContext) -> None:
        self.context = context
        self.workspace = context.workspace
        self.git = context.git or GitClient(context.workspace.root)

    @abstractmethod
    async def execute(self) -> TResult:
        """Execute the command."""
        ...


class SyncCommand(ABC, Generic[TResult]):
    """Base class for synchronous commands."""

    def __init__(self, context: CommandContext) -> None:
        self.context = context
        self.workspace = context.workspace
        self.git = context.git or GitClient(context.workspace.root)

    @abstractmethod
    def execute(self) -> TResult:
        """Execute the command synchronously."""
        ...
