"""Run-script command implementation."""

from __future__ import annotations

import fnmatch
import shlex
from collections.abc import Callable
from dataclasses import dataclass

import typer
from rich.console import Console
from rich.markup import escape

from monopub.commands.base import Command, CommandContext
from monopub.errors import MonoPubError, ScriptNotFoundError
from monopub.execution import BatchResult, ExecutionResult, ParallelExecutor, run_in_package
from monopub.workspace import Package, Workspace

DEFAULT_SCRIPT_RUNNER = "yarn run"


@dataclass
class RunOptions:
    """Options for run-script command.

    Attributes:
        pattern: Glob matched against script names in each package.json.
        parallel: Run packages concurrently instead of one after another.
        tree: Run packages in dependency order (dependencies first).
        parallel_limit: Maximum concurrent packages (default: unbounded).
        ignore_errors: Keep going after a package fails.
        runner: Command prefix used to run a script.
    """

    pattern: str
    parallel: bool = False
    tree: bool = False
    parallel_limit: int | None = None
    ignore_errors: bool = False
    runner: str = DEFAULT_SCRIPT_RUNNER


class RunCommand(Command[BatchResult]):
    """Run matching package.json scripts across packages.

    Each package runs its matching scripts one by one, in manifest order,
    and stops at its first failing script.
    """

    def __init__(
        self,
        context: CommandContext,
        options: RunOptions,
        output_handler: Callable[[str, str, bool], None] | None = None,
    ) -> None:
        super().__init__(context)
        self.options = options
        self.output_handler = output_handler

    def matching_scripts(self, package: Package) -> list[str]:
        return [name for name in package.scripts if fnmatch.fnmatchcase(name, self.options.pattern)]

    def get_packages(self) -> list[Package]:
        """Packages with at least one matching script, in discovery order."""
        return [p for p in self.workspace.packages.values() if self.matching_scripts(p)]

    @property
    def concurrency(self) -> int:
        if not (self.options.parallel or self.options.tree):
            return 1
        if self.options.parallel_limit:
            return self.options.parallel_limit
        return max(1, len(self.workspace.packages))

    async def run_package(self, package: Package) -> ExecutionResult:
        env = {**self.workspace.config.env, **self.context.env}

        on_out = None
        on_err = None
        if self.output_handler:
            handler = self.output_handler

            def _on_out(line: str) -> None:
                handler(package.name, line, False)

            def _on_err(line: str) -> None:
                handler(package.name, line, True)

            on_out = _on_out
            on_err = _on_err

        result = ExecutionResult.skipped_result(package.name, "no matching scripts")
        for script in self.matching_scripts(package):
            result = await run_in_package(
                package,
                f"{self.options.runner} {shlex.quote(script)}",
                env=env,
                on_stdout=on_out,
                on_stderr=on_err,
            )
            if result.failed:
                break
        return result

    async def execute(self) -> BatchResult:
        """Execute the scripts.

        Raises:
            ScriptNotFoundError: If no package has a matching script.
        """
        packages = self.get_packages()
        if not packages:
            raise ScriptNotFoundError(self.options.pattern)

        executor = ParallelExecutor(
            concurrency=self.concurrency,
            fail_fast=not self.options.ignore_errors,
        )

        if self.options.tree:
            graph = self.workspace.graph
            ordered = graph.topological_order(p.name for p in packages)
            requires = {
                pkg.name: {dep.name for dep in graph.get_transitive_dependencies(pkg.name)}
                for pkg in ordered
            }
            return await executor.run_ordered(ordered, self.run_package, requires=requires)

        return await executor.run_tasks(packages, self.run_package)


async def run_script(
    workspace: Workspace,
    pattern: str,
    *,
    parallel: bool = False,
    tree: bool = False,
    parallel_limit: int | None = None,
    ignore_errors: bool = False,
    output_handler: Callable[[str, str, bool], None] | None = None,
) -> BatchResult:
    """Convenience function to run scripts.

    Args:
        workspace: Workspace to run in.
        pattern: Script name glob.
        parallel: Run packages concurrently.
        tree: Respect dependency order.
        parallel_limit: Maximum concurrent packages.
        ignore_errors: Do not stop after the first failure.
        output_handler: Callback for output streaming.

    Returns:
        Batch result with all execution results.
    """
    context = CommandContext(workspace=workspace)
    options = RunOptions(
        pattern=pattern,
        parallel=parallel,
        tree=tree,
        parallel_limit=parallel_limit,
        ignore_errors=ignore_errors,
    )
    cmd = RunCommand(context, options, output_handler=output_handler)
    return await cmd.execute()


async def handle_run_script(
    workspace: Workspace,
    pattern: str,
    *,
    console: Console,
    error_console: Console,
    parallel: bool = False,
    tree: bool = False,
    parallel_limit: int | None = None,
    ignore_errors: bool = False,
) -> None:
    def output_handler(pkg_name: str, line: str, is_stderr: bool) -> None:
        prefix = escape(f"[{pkg_name}] ")
        if is_stderr:
            error_console.print(f"[red]{prefix}[/red]{escape(line)}")
        else:
            console.print(f"[dim]{prefix}[/dim]{escape(line)}")

    try:
        result = await run_script(
            workspace,
            pattern,
            parallel=parallel,
            tree=tree,
            parallel_limit=parallel_limit,
            ignore_errors=ignore_errors,
            output_handler=output_handler,
        )
    except MonoPubError as err:
        error_console.print(f"[red]Error:[/red] {escape(err.message)}")
        raise typer.Exit(1) from err

    if result.all_success:
        console.print(f"\n[green]All {len(result)} packages passed[/green]")
    else:
        console.print(
            f"\n[red]{result.failure_count} failed, {result.success_count} passed, "
            f"{result.cancelled_count} not run[/red]"
        )
        raise typer.Exit(1)
