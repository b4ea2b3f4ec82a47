"""Execution result types."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class ExecutionStatus(Enum):
    """Outcome of running a command in one package."""

    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"  # not reached because an earlier run failed
    SKIPPED = "skipped"


@dataclass
class ExecutionResult:
    """Result of running a command in one package.

    Attributes:
        package_name: Package the command ran in.
        status: Outcome.
        exit_code: Process exit code (-1 when the command never ran).
        stdout: Captured standard output.
        stderr: Captured standard error.
        duration_ms: Wall time in milliseconds.
        command: The command that was run.
    """

    package_name: str
    status: ExecutionStatus
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0
    command: str | None = None

    @property
    def success(self) -> bool:
        return self.status == ExecutionStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == ExecutionStatus.FAILURE

    @classmethod
    def success_result(
        cls,
        package_name: str,
        *,
        stdout: str = "",
        stderr: str = "",
        duration_ms: int = 0,
        command: str | None = None,
    ) -> ExecutionResult:
        return cls(package_name, ExecutionStatus.SUCCESS, 0, stdout, stderr, duration_ms, command)

    @classmethod
    def failure_result(
        cls,
        package_name: str,
        *,
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
        duration_ms: int = 0,
        command: str | None = None,
    ) -> ExecutionResult:
        return cls(
            package_name, ExecutionStatus.FAILURE, exit_code, stdout, stderr, duration_ms, command
        )

    @classmethod
    def cancelled_result(cls, package_name: str) -> ExecutionResult:
        return cls(package_name, ExecutionStatus.CANCELLED, -1)

    @classmethod
    def skipped_result(cls, package_name: str, reason: str = "") -> ExecutionResult:
        return cls(package_name, ExecutionStatus.SKIPPED, 0, stdout=reason)


@dataclass
class BatchResult:
    """Results of running a command across packages."""

    results: list[ExecutionResult] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[ExecutionResult]:
        return iter(self.results)

    def with_status(self, status: ExecutionStatus) -> list[ExecutionResult]:
        return [r for r in self.results if r.status == status]

    @property
    def all_success(self) -> bool:
        """True if nothing failed or was cancelled (skips are fine)."""
        return all(r.status in (ExecutionStatus.SUCCESS, ExecutionStatus.SKIPPED) for r in self)

    @property
    def any_failure(self) -> bool:
        return any(r.failed for r in self.results)

    @property
    def success_count(self) -> int:
        return len(self.with_status(ExecutionStatus.SUCCESS))

    @property
    def failure_count(self) -> int:
        return len(self.with_status(ExecutionStatus.FAILURE))

    @property
    def cancelled_count(self) -> int:
        return len(self.with_status(ExecutionStatus.CANCELLED))
