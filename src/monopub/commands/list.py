"""List command implementation."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from enum import Enum

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from monopub.commands.base import CommandContext, SyncCommand
from monopub.dirty import git_change_probe, resolve_dirty
from monopub.errors import MonoPubError
from monopub.workspace import Workspace


class ListFormat(Enum):
    """Output format for list command."""

    TABLE = "table"
    JSON = "json"
    NAMES = "names"


@dataclass
class PackageInfo:
    """Information about a package for display.

    ``level`` is the dependency depth: 0 for packages without local
    dependencies, n + 1 for packages whose deepest dependency is at n.
    """

    name: str
    version: str
    path: str
    private: bool
    level: int
    dependencies: list[str]
    dependents: list[str]
    dirty: bool | None = None


@dataclass
class ListResult:
    """Result of list command."""

    packages: list[PackageInfo]
    since: str | None = None
    format: ListFormat = ListFormat.TABLE


@dataclass
class ListOptions:
    """Options for list command."""

    since: str | None = None
    format: ListFormat = ListFormat.TABLE


class ListCommand(SyncCommand[ListResult]):
    """List packages in the workspace, in discovery order."""

    def __init__(self, context: CommandContext, options: ListOptions | None = None) -> None:
        super().__init__(context)
        self.options = options or ListOptions()

    def execute(self) -> ListResult:
        graph = self.workspace.graph

        levels: dict[str, int] = {}
        for level, batch in enumerate(self.workspace.parallel_batches()):
            for pkg in batch:
                levels[pkg.name] = level

        dirty: set[str] | None = None
        if self.options.since:
            probe = git_change_probe(self.git, self.options.since)
            dirty = {p.name for p in resolve_dirty(graph, probe)}

        infos = [
            PackageInfo(
                name=pkg.name,
                version=pkg.version,
                path=pkg.path.relative_to(self.workspace.root).as_posix(),
                private=pkg.private,
                level=levels[pkg.name],
                dependencies=[d.name for d in graph.get_dependencies(pkg.name)],
                dependents=[d.name for d in graph.get_dependents(pkg.name)],
                dirty=None if dirty is None else pkg.name in dirty,
            )
            for pkg in self.workspace.packages.values()
        ]
        return ListResult(packages=infos, since=self.options.since, format=self.options.format)


def list_packages(
    workspace: Workspace,
    *,
    since: str | None = None,
    format: ListFormat = ListFormat.TABLE,
) -> ListResult:
    """Convenience function to list packages.

    Args:
        workspace: Workspace to list.
        since: Git reference to mark dirty packages against.
        format: Output format.

    Returns:
        List result with package info.
    """
    context = CommandContext(workspace=workspace)
    options = ListOptions(since=since, format=format)
    return ListCommand(context, options).execute()


def handle_list_command(
    workspace: Workspace,
    *,
    console: Console,
    error_console: Console,
    since: str | None = None,
    json_output: bool = False,
    names_only: bool = False,
) -> None:
    fmt = ListFormat.TABLE
    if json_output:
        fmt = ListFormat.JSON
    elif names_only:
        fmt = ListFormat.NAMES

    try:
        result = list_packages(workspace, since=since, format=fmt)
    except MonoPubError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    if fmt == ListFormat.JSON:
        console.print_json(json.dumps([asdict(p) for p in result.packages]))
        return

    if fmt == ListFormat.NAMES:
        for pkg in result.packages:
            console.print(pkg.name, highlight=False)
        return

    table = Table(title="Packages")
    table.add_column("Name", style="bold")
    table.add_column("Version")
    table.add_column("Path")
    table.add_column("Level", justify="right")
    table.add_column("Dependencies")
    if result.since:
        table.add_column(f"Dirty since {result.since}")

    for pkg in result.packages:
        name = f"{pkg.name} [dim](private)[/dim]" if pkg.private else pkg.name
        row = [
            name,
            pkg.version,
            pkg.path,
            str(pkg.level),
            ", ".join(pkg.dependencies) or "-",
        ]
        if result.since:
            row.append("[yellow]yes[/yellow]" if pkg.dirty else "no")
        table.add_row(*row)

    console.print(table)
