"""Parallel package execution with concurrency control."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Collection, Mapping, Sequence

from monopub.execution.results import BatchResult, ExecutionResult
from monopub.workspace.package import Package

PackageTask = Callable[[Package], Awaitable[ExecutionResult]]


class ParallelExecutor:
    """Run per-package work with bounded parallelism.

    Supports dependency ordering and fail-fast behavior.

    Attributes:
        concurrency: Maximum number of concurrent executions.
        fail_fast: Stop starting new work after the first failure.
    """

    def __init__(self, concurrency: int = 4, fail_fast: bool = False) -> None:
        self.concurrency = max(1, concurrency)
        self.fail_fast = fail_fast
        self._cancelled = False

    async def run_tasks(self, packages: Sequence[Package], task: PackageTask) -> BatchResult:
        """Run ``task`` for every package, at most ``concurrency`` at a time.

        Returns:
            Results in the order of ``packages``.
        """
        self._cancelled = False
        semaphore = asyncio.Semaphore(self.concurrency)

        async def run_one(pkg: Package) -> ExecutionResult:
            async with semaphore:
                if self._cancelled:
                    return ExecutionResult.cancelled_result(pkg.name)
                result = await task(pkg)
                if self.fail_fast and result.failed:
                    self._cancelled = True
                return result

        results = await asyncio.gather(*(run_one(pkg) for pkg in packages))
        return BatchResult(results=list(results))

    async def run_ordered(
        self,
        packages: Sequence[Package],
        task: PackageTask,
        *,
        requires: Mapping[str, Collection[str]],
    ) -> BatchResult:
        """Run ``task`` per package, never before the packages it requires.

        A package starts only after every package listed for it in
        ``requires`` (and present in ``packages``) finished successfully;
        otherwise it is cancelled. With ``concurrency == 1`` packages run
        strictly in the given order.

        Args:
            packages: Packages in a dependency-respecting order.
            task: Work to run for one package.
            requires: Package name -> names that must succeed first.

        Returns:
            Results in the order of ``packages``.
        """
        self._cancelled = False
        names = {p.name for p in packages}
        results: dict[str, ExecutionResult] = {}

        def blocked(pkg: Package) -> bool:
            return any(
                not (dep in results and results[dep].success)
                for dep in requires.get(pkg.name, ())
                if dep in names
            )

        if self.concurrency == 1:
            for pkg in packages:
                if self._cancelled or blocked(pkg):
                    results[pkg.name] = ExecutionResult.cancelled_result(pkg.name)
                    continue
                result = await task(pkg)
                results[pkg.name] = result
                if self.fail_fast and result.failed:
                    self._cancelled = True
            return BatchResult(results=[results[p.name] for p in packages])

        finished = {p.name: asyncio.Event() for p in packages}
        semaphore = asyncio.Semaphore(self.concurrency)

        async def run_one(pkg: Package) -> None:
            try:
                for dep in requires.get(pkg.name, ()):
                    if dep in finished:
                        await finished[dep].wait()
                if self._cancelled or blocked(pkg):
                    results[pkg.name] = ExecutionResult.cancelled_result(pkg.name)
                    return
                async with semaphore:
                    if self._cancelled:
                        results[pkg.name] = ExecutionResult.cancelled_result(pkg.name)
                        return
                    result = await task(pkg)
                    results[pkg.name] = result
                    if self.fail_fast and result.failed:
                        self._cancelled = True
            finally:
                finished[pkg.name].set()

        await asyncio.gather(*(run_one(pkg) for pkg in packages))
        return BatchResult(results=[results[p.name] for p in packages])
