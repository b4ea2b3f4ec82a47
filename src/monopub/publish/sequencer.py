"""Publish ordering and execution."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from monopub.errors import PublishError
from monopub.execution.parallel import PackageTask, ParallelExecutor
from monopub.execution.results import ExecutionResult, ExecutionStatus
from monopub.workspace.graph import DependencyGraph
from monopub.workspace.package import Package


def publish_sequence(graph: DependencyGraph, packages: Iterable[Package]) -> list[Package]:
    """Order the non-private ``packages`` for publication.

    Dependencies come before dependents; packages without a constraint
    between them keep discovery order.
    """
    return graph.topological_order(p.name for p in packages if not p.private)


@dataclass
class PublishReport:
    """Per-package publish outcome.

    Results are listed in publish order, followed by skipped private
    packages.
    """

    results: list[ExecutionResult] = field(default_factory=list)

    def _names(self, status: ExecutionStatus) -> list[str]:
        return [r.package_name for r in self.results if r.status == status]

    @property
    def published(self) -> list[str]:
        return self._names(ExecutionStatus.SUCCESS)

    @property
    def failed(self) -> list[str]:
        return self._names(ExecutionStatus.FAILURE)

    @property
    def skipped(self) -> list[str]:
        """Private packages that were left out."""
        return self._names(ExecutionStatus.SKIPPED)

    @property
    def not_reached(self) -> list[str]:
        """Packages never attempted because publishing halted."""
        return self._names(ExecutionStatus.CANCELLED)

    @property
    def success(self) -> bool:
        return not self.failed and not self.not_reached

    def get(self, name: str) -> ExecutionResult | None:
        return next((r for r in self.results if r.package_name == name), None)

    def raise_for_failure(self) -> None:
        """Raise PublishError for the package that halted publishing."""
        for result in self.results:
            if result.failed:
                output = result.stderr.strip() or result.stdout.strip()
                raise PublishError(result.package_name, output)


async def publish_packages(
    graph: DependencyGraph,
    packages: Iterable[Package],
    publish: PackageTask,
    *,
    concurrency: int = 1,
) -> PublishReport:
    """Publish packages in dependency order, halting on the first failure.

    Private packages are reported as skipped. Up to ``concurrency``
    unrelated packages publish at the same time; a package never starts
    before all of its (transitive) local dependencies in the sequence
    have been published.

    Args:
        graph: Dependency graph of the workspace.
        packages: Candidate packages (typically the dirty set).
        publish: Publishes one package.
        concurrency: Maximum simultaneous publishes.
    """
    candidates = list(packages)
    sequence = publish_sequence(graph, candidates)
    requires = {
        pkg.name: {dep.name for dep in graph.get_transitive_dependencies(pkg.name)}
        for pkg in sequence
    }

    executor = ParallelExecutor(concurrency=concurrency, fail_fast=True)
    batch = await executor.run_ordered(sequence, publish, requires=requires)

    skipped = [
        ExecutionResult.skipped_result(p.name, "private package") for p in candidates if p.private
    ]
    return PublishReport(results=batch.results + skipped)
