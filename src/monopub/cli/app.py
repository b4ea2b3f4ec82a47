"""monopub CLI application."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from monopub.errors import MonoPubError
from monopub.log import setup_logging
from monopub.workspace import Workspace


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from monopub import __version__

        print(f"monopub {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="monopub",
    help="Version and publish the packages of a JavaScript monorepo",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
error_console = Console(stderr=True)


@app.callback()
def _app_callback(
    version: Annotated[  # noqa: ARG001
        bool,
        typer.Option("--version", "-V", help="Show version and exit", callback=version_callback),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Monorepo publish engine."""
    setup_logging(verbose=verbose, console=error_console)


def parse_comma_list(value: str | None) -> list[str] | None:
    """Parse comma-separated string into list."""
    return [v.strip() for v in value.split(",") if v.strip()] if value else None


def get_workspace(
    path: Path | None = None,
    *,
    src: str | None = None,
    ignore_src: str | None = None,
    single: bool = False,
) -> Workspace:
    """Load workspace from current directory or specified path."""
    try:
        return Workspace.discover(
            path,
            patterns=parse_comma_list(src),
            ignore=parse_comma_list(ignore_src),
            single=single,
        )
    except MonoPubError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e


SrcOption = Annotated[
    str | None,
    typer.Option("--src", help="Package glob patterns (comma-separated)"),
]
IgnoreSrcOption = Annotated[
    str | None,
    typer.Option("--ignore-src", help="Package directories to skip (comma-separated globs)"),
]


@app.command()
def publish(
    src: SrcOption = None,
    ignore_src: IgnoreSrcOption = None,
    single: Annotated[
        bool,
        typer.Option("--single", help="Treat the root package.json as the only package"),
    ] = False,
    no_master: Annotated[
        bool,
        typer.Option("--no-master", help="Allow publishing from any branch"),
    ] = False,
    no_check_uncommitted: Annotated[
        bool,
        typer.Option("--no-check-uncommitted", help="Skip the uncommitted changes check"),
    ] = False,
    no_check_unpulled: Annotated[
        bool,
        typer.Option("--no-check-unpulled", help="Skip the unpulled changes check"),
    ] = False,
    no_checks: Annotated[
        bool,
        typer.Option("--no-checks", help="Skip all git checks"),
    ] = False,
    no_bump: Annotated[
        bool,
        typer.Option("--no-bump", help="Publish without bumping versions"),
    ] = False,
    no_git_commit: Annotated[
        bool,
        typer.Option("--no-git-commit", help="Bump manifests without commit, tag and push"),
    ] = False,
    no_npm_publish: Annotated[
        bool,
        typer.Option("--no-npm-publish", help="Skip publishing to the registry"),
    ] = False,
    publish_all: Annotated[
        bool,
        typer.Option("--all", help="Publish every non-private package, dirty or not"),
    ] = False,
    new_version: Annotated[
        str | None,
        typer.Option("--new-version", help="Explicit version for dirty packages"),
    ] = None,
    increment_version_by: Annotated[
        str | None,
        typer.Option(
            "--increment-version-by",
            help="major, minor, patch, premajor, preminor, prepatch, prerelease, alpha, beta, rc",
        ),
    ] = None,
    master_version: Annotated[
        str | None,
        typer.Option("--master-version", help="Version to bump from"),
    ] = None,
    bump_dependent_reqs: Annotated[
        str | None,
        typer.Option("--bump-dependent-reqs", help="exact, range or no"),
    ] = None,
    publish_tag: Annotated[
        str | None,
        typer.Option("--publish-tag", help="Registry dist-tag"),
    ] = None,
    otp: Annotated[
        str | None,
        typer.Option("--otp", help="One-time password for the registry"),
    ] = None,
    access: Annotated[
        str | None,
        typer.Option("--access", help="public or private"),
    ] = None,
    concurrency: Annotated[
        int | None,
        typer.Option("--concurrency", "-c", help="Parallel publishes"),
    ] = None,
    changelog: Annotated[
        bool | None,
        typer.Option("--changelog/--no-changelog", help="Prepend a changelog entry"),
    ] = None,
    changelog_path: Annotated[
        str | None,
        typer.Option("--changelog-path", help="Changelog file relative to the root"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show the plan without changing anything"),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation"),
    ] = False,
) -> None:
    """Bump dirty packages, commit, tag, push and publish them."""
    from monopub.commands import PublishOptions, handle_publish_command

    options = PublishOptions(
        src=parse_comma_list(src),
        ignore_src=parse_comma_list(ignore_src),
        single=single,
        master=not no_master,
        check_uncommitted=not no_check_uncommitted,
        check_unpulled=not no_check_unpulled,
        checks=not no_checks,
        bump=not no_bump,
        git_commit=not no_git_commit,
        npm_publish=not no_npm_publish,
        publish_all=publish_all,
        new_version=new_version,
        increment_version_by=increment_version_by,
        master_version=master_version,
        bump_dependent_reqs=bump_dependent_reqs,
        publish_tag=publish_tag,
        otp=otp,
        access=access,
        concurrency=concurrency,
        changelog=changelog,
        changelog_path=changelog_path,
        dry_run=dry_run,
    )

    try:
        options.validate()
        workspace = options.load_workspace()
    except MonoPubError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    asyncio.run(
        handle_publish_command(
            workspace,
            options,
            console=console,
            error_console=error_console,
            yes=yes,
        )
    )


@app.command("run-script")
def run_script_cmd(
    pattern: Annotated[str, typer.Argument(help="Script name or glob, e.g. 'test*'")],
    src: SrcOption = None,
    ignore_src: IgnoreSrcOption = None,
    parallel: Annotated[
        bool,
        typer.Option("--parallel", help="Run packages concurrently"),
    ] = False,
    tree: Annotated[
        bool,
        typer.Option("--tree", help="Run packages in dependency order"),
    ] = False,
    parallel_limit: Annotated[
        int | None,
        typer.Option("--parallel-limit", help="Maximum concurrent packages"),
    ] = None,
    ignore_errors: Annotated[
        bool,
        typer.Option("--ignore-errors", help="Keep going after a failure"),
    ] = False,
) -> None:
    """Run matching package.json scripts across packages."""
    from monopub.commands import handle_run_script

    workspace = get_workspace(src=src, ignore_src=ignore_src)
    asyncio.run(
        handle_run_script(
            workspace,
            pattern,
            console=console,
            error_console=error_console,
            parallel=parallel,
            tree=tree,
            parallel_limit=parallel_limit,
            ignore_errors=ignore_errors,
        )
    )


@app.command("list")
def list_cmd(
    src: SrcOption = None,
    ignore_src: IgnoreSrcOption = None,
    since: Annotated[
        str | None,
        typer.Option("--since", help="Mark packages dirty since a git ref"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
    names: Annotated[
        bool,
        typer.Option("--names", help="Print package names only"),
    ] = False,
) -> None:
    """List workspace packages."""
    from monopub.commands import handle_list_command

    workspace = get_workspace(src=src, ignore_src=ignore_src)
    handle_list_command(
        workspace,
        console=console,
        error_console=error_console,
        since=since,
        json_output=json_output,
        names_only=names,
    )


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
