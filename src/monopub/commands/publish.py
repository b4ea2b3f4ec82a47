"""Publish command: bump dirty packages and publish them in dependency order."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from monopub.commands.base import Command, CommandContext
from monopub.dirty import ChangeProbe, git_change_probe, resolve_dirty
from monopub.errors import (
    BranchCheckError,
    ConfigurationError,
    MonoPubError,
    UncommittedCheckError,
    UnpulledCheckError,
)
from monopub.publish import (
    PublishReport,
    RegistryPublisher,
    build_publish_command,
    publish_packages,
    publish_sequence,
)
from monopub.versioning import (
    BumpPolicy,
    ManifestUpdate,
    VersionDirective,
    generate_changelog_entry,
    parse_version,
    plan_version,
    prepend_to_changelog,
    resolve_directive,
    rewrite_manifests,
)
from monopub.workspace import Workspace

if TYPE_CHECKING:
    from monopub.git import GitClient
    from monopub.workspace import Package

logger = logging.getLogger(__name__)

RELEASE_BRANCHES = ("master", "main")


@dataclass
class PublishOptions:
    """Options for the publish command.

    ``None`` means "use the workspace configuration".
    """

    src: list[str] | None = None
    ignore_src: list[str] | None = None
    single: bool = False
    master: bool = True
    check_uncommitted: bool = True
    check_unpulled: bool = True
    checks: bool = True
    bump: bool = True
    git_commit: bool = True
    npm_publish: bool = True
    publish_all: bool = False
    new_version: str | None = None
    increment_version_by: str | None = None
    master_version: str | None = None
    bump_dependent_reqs: BumpPolicy | str | None = None
    publish_tag: str | None = None
    otp: str | None = None
    access: str | None = None
    concurrency: int | None = None
    changelog: bool | None = None
    changelog_path: str | None = None
    dry_run: bool = False

    def validate(self) -> VersionDirective:
        """Check every option before anything runs.

        Returns:
            The version directive for this invocation.

        Raises:
            InvalidIncrementError: Unknown ``increment_version_by``.
            InvalidVersionError: Invalid ``new_version`` or ``master_version``.
            ConfigurationError: Unknown bump policy or bad concurrency.
        """
        if self.bump_dependent_reqs is not None:
            try:
                BumpPolicy(self.bump_dependent_reqs)
            except ValueError as e:
                allowed = ", ".join(p.value for p in BumpPolicy)
                raise ConfigurationError(
                    f"Invalid bump_dependent_reqs '{self.bump_dependent_reqs}'. Allowed: {allowed}"
                ) from e

        if self.concurrency is not None and self.concurrency < 1:
            raise ConfigurationError("concurrency must be at least 1")

        if self.master_version is not None:
            parse_version(self.master_version)

        return resolve_directive(self.new_version, self.increment_version_by)

    def load_workspace(self, path: Path | None = None) -> Workspace:
        """Discover the workspace these options select packages from."""
        return Workspace.discover(
            path, patterns=self.src, ignore=self.ignore_src, single=self.single
        )


@dataclass
class PublishResult:
    """Result of the publish command.

    Attributes:
        baseline: Version the bump started from.
        new_version: Version applied to dirty packages (None without bump).
        dirty: Dirty packages in discovery order.
        updates: Manifests rewritten (or to be rewritten on dry run).
        sequence: Packages in publish order.
        report: Publish outcome (None if publishing did not run).
        commit_sha: Release commit, if one was made.
        tag: Release tag, if one was made.
    """

    baseline: str
    new_version: str | None = None
    dirty: list[Package] = field(default_factory=list)
    updates: list[ManifestUpdate] = field(default_factory=list)
    sequence: list[Package] = field(default_factory=list)
    report: PublishReport | None = None
    commit_sha: str | None = None
    tag: str | None = None

    @property
    def nothing_to_publish(self) -> bool:
        return not self.dirty

    @property
    def success(self) -> bool:
        return self.report is None or self.report.success


class PublishCommand(Command[PublishResult]):
    """Bump, commit, tag, push and publish the dirty packages."""

    def __init__(
        self,
        context: CommandContext,
        options: PublishOptions | None = None,
        *,
        change_probe: ChangeProbe | None = None,
        publisher: RegistryPublisher | None = None,
    ) -> None:
        super().__init__(context)
        self.options = options or PublishOptions()
        self.change_probe = change_probe
        self._publisher = publisher

    @property
    def is_dry_run(self) -> bool:
        return self.options.dry_run or self.context.dry_run

    @property
    def policy(self) -> BumpPolicy:
        if self.options.bump_dependent_reqs is not None:
            return BumpPolicy(self.options.bump_dependent_reqs)
        return self.workspace.config.versioning.bump_dependent_reqs

    @property
    def publisher(self) -> RegistryPublisher:
        if self._publisher is None:
            config = self.workspace.config.publish
            command = build_publish_command(
                config.command,
                tag=self.options.publish_tag or config.tag,
                otp=self.options.otp,
                access=self.options.access or config.access,
            )
            env = {**self.workspace.config.env, **self.context.env}
            self._publisher = RegistryPublisher(command, env=env)
        return self._publisher

    def run_checks(self) -> None:
        """Verify branch and working tree state.

        Raises:
            BranchCheckError: Not on master/main.
            UncommittedCheckError: Uncommitted changes present.
            UnpulledCheckError: Upstream has commits not pulled yet.
        """
        if not self.options.checks:
            return

        if self.options.master:
            branch = self.git.current_branch()
            if branch not in RELEASE_BRANCHES:
                raise BranchCheckError(branch)

        if self.options.check_uncommitted:
            diff = self.git.uncommitted_changes()
            if diff:
                raise UncommittedCheckError(diff)

        if self.options.check_unpulled:
            diff = self.git.unpulled_changes()
            if diff:
                raise UnpulledCheckError(diff)

    def baseline_version(self) -> str:
        """Version the bump starts from.

        The ``master_version`` option wins, then the root package.json, then
        the highest version among the workspace packages.
        """
        if self.options.master_version:
            return self.options.master_version

        root = self.workspace.root_package
        if root is not None:
            return root.version

        versions = [parse_version(p.version) for p in self.workspace.packages.values()]
        if not versions:
            raise ConfigurationError("No packages found to derive a baseline version from")
        return str(max(versions))

    def release_ref(self, version: str) -> str:
        return self.workspace.config.versioning.tag_format.format(version=version)

    def _apply_updates(self, updates: list[ManifestUpdate], new_version: str) -> None:
        for update in updates:
            self.workspace.store.write(update.package.path, update.manifest)
            pkg = update.package
            pkg.manifest = update.manifest
            pkg.dependencies = dict(update.manifest.get("dependencies") or {})
            pkg.dev_dependencies = dict(update.manifest.get("devDependencies") or {})
            if update.version_changed:
                pkg.version = new_version

    def _write_changelog(self, new_version: str, dirty: list[Package], since: str) -> None:
        enabled = self.options.changelog
        if enabled is None:
            enabled = self.workspace.config.changelog.enabled
        if not enabled:
            return

        commits = self.git.commit_subjects(since if self.git.ref_exists(since) else None)
        entry = generate_changelog_entry(new_version, [p.name for p in dirty], commits)
        filename = self.options.changelog_path or self.workspace.config.changelog.filename
        prepend_to_changelog(self.workspace.root / filename, entry)

    def _commit_tag_push(self, new_version: str) -> tuple[str, str]:
        versioning = self.workspace.config.versioning
        sha = self.git.commit_changes(versioning.commit_message.format(version=new_version))
        tag = self.release_ref(new_version)
        self.git.add_tag(tag, f"Release {tag}")
        self.git.push_with_tags()
        return sha, tag

    async def execute(self) -> PublishResult:
        """Run the pipeline.

        An empty dirty set ends the run early without touching anything.
        """
        directive = self.options.validate()
        self.run_checks()

        graph = self.workspace.graph
        baseline = self.baseline_version()
        since = self.release_ref(baseline)
        probe = self.change_probe or git_change_probe(self.git, since)

        dirty = resolve_dirty(graph, probe)
        result = PublishResult(baseline=baseline, dirty=dirty)
        if not dirty:
            logger.info("No dirty packages since %s", since)
            return result

        all_packages = list(self.workspace.packages.values())
        candidates = all_packages if self.options.publish_all else dirty
        if self.options.npm_publish:
            result.sequence = publish_sequence(graph, candidates)

        if self.options.bump:
            result.new_version = plan_version(baseline, directive)
            result.updates = rewrite_manifests(
                all_packages,
                dirty,
                result.new_version,
                self.policy,
                root=self.workspace.root_package,
            )

        if self.is_dry_run:
            return result

        if self.options.bump and result.new_version:
            self._apply_updates(result.updates, result.new_version)
            self._write_changelog(result.new_version, dirty, since)
            if self.options.git_commit:
                result.commit_sha, result.tag = self._commit_tag_push(result.new_version)

        if self.options.npm_publish:
            concurrency = self.options.concurrency or self.workspace.config.publish.concurrency
            result.report = await publish_packages(
                graph, candidates, self.publisher.publish, concurrency=concurrency
            )

        return result


async def publish(
    workspace: Workspace,
    options: PublishOptions | None = None,
    *,
    git: GitClient | None = None,
    change_probe: ChangeProbe | None = None,
    publisher: RegistryPublisher | None = None,
) -> PublishResult:
    """Convenience function to run the publish pipeline."""
    options = options or PublishOptions()
    context = CommandContext(workspace=workspace, dry_run=options.dry_run, git=git)
    cmd = PublishCommand(context, options, change_probe=change_probe, publisher=publisher)
    return await cmd.execute()


def _print_plan(console: Console, result: PublishResult) -> None:
    table = Table(title=f"{result.baseline} -> {result.new_version or result.baseline}")
    table.add_column("Package", style="cyan")
    table.add_column("Version", style="green")
    table.add_column("Rewritten requirements", style="dim")
    table.add_column("Publish", style="magenta")

    updates = {u.package.name: u for u in result.updates}
    order = {p.name: i + 1 for i, p in enumerate(result.sequence)}
    for pkg in result.dirty:
        update = updates.get(pkg.name)
        rewritten = ", ".join(name for _, name in update.rewritten) if update else ""
        if pkg.private:
            publish_col = "private"
        else:
            publish_col = f"#{order[pkg.name]}" if pkg.name in order else "-"
        table.add_row(pkg.name, result.new_version or pkg.version, rewritten or "-", publish_col)

    console.print(table)


def _print_report(console: Console, error_console: Console, report: PublishReport) -> None:
    for r in report.results:
        name = escape(f"[{r.package_name}]")
        if r.success:
            console.print(f"[green]✓[/green] {name} published ({r.duration_ms}ms)")
        elif r.failed:
            error_console.print(f"[red]✗[/red] {name} failed (exit {r.exit_code})")
            if r.stderr:
                error_console.print(escape(r.stderr))
        elif r.package_name in report.skipped:
            console.print(f"[dim]-[/dim] {name} skipped (private)")
        else:
            console.print(f"[yellow]…[/yellow] {name} not reached")


async def handle_publish_command(
    workspace: Workspace,
    options: PublishOptions,
    *,
    console: Console,
    error_console: Console,
    yes: bool = False,
) -> None:
    """Handle the publish command from the CLI with plan and confirmation."""

    def output_handler(pkg_name: str, line: str, is_stderr: bool) -> None:
        target = error_console if is_stderr else console
        target.print(f"[dim]{escape(f'[{pkg_name}]')}[/dim] {escape(line)}")

    try:
        plan = await publish(workspace, replace(options, dry_run=True))

        if plan.nothing_to_publish:
            console.print("[yellow]No dirty packages, nothing to publish[/yellow]")
            return

        _print_plan(console, plan)

        if options.dry_run:
            console.print("[yellow]Dry run - no changes made[/yellow]")
            return

        if not yes and not typer.confirm("\nProceed with publishing?", default=False):
            console.print("[yellow]Publish cancelled.[/yellow]")
            return

        publisher = None
        if options.npm_publish:
            config = workspace.config.publish
            publisher = RegistryPublisher(
                build_publish_command(
                    config.command,
                    tag=options.publish_tag or config.tag,
                    otp=options.otp,
                    access=options.access or config.access,
                ),
                env=dict(workspace.config.env),
                output_handler=output_handler,
            )

        result = await publish(workspace, options, publisher=publisher)

        if result.commit_sha:
            console.print(f"Commit: [blue]{result.commit_sha[:8]}[/blue] tag {result.tag}")

        if result.report is not None:
            _print_report(console, error_console, result.report)
            if not result.report.success:
                error_console.print(
                    f"\n[red]Publish halted:[/red] {len(result.report.published)} published, "
                    f"{len(result.report.not_reached)} not reached"
                )
                result.report.raise_for_failure()
            console.print(f"\n[green]Published {len(result.report.published)} packages[/green]")

    except MonoPubError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e
