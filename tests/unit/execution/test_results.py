"""Tests for execution result types."""

from __future__ import annotations

from monopub.execution import BatchResult, ExecutionResult, ExecutionStatus


def test_factories() -> None:
    ok = ExecutionResult.success_result("a", stdout="done", duration_ms=5, command="npm publish")
    assert ok.success and not ok.failed
    assert ok.exit_code == 0

    bad = ExecutionResult.failure_result("b", exit_code=2, stderr="E403")
    assert bad.failed
    assert bad.exit_code == 2

    cancelled = ExecutionResult.cancelled_result("c")
    assert cancelled.status == ExecutionStatus.CANCELLED
    assert not cancelled.success and not cancelled.failed

    skipped = ExecutionResult.skipped_result("d", "private package")
    assert skipped.status == ExecutionStatus.SKIPPED
    assert skipped.stdout == "private package"


def test_batch_counts() -> None:
    batch = BatchResult(
        results=[
            ExecutionResult.success_result("a"),
            ExecutionResult.failure_result("b", exit_code=1),
            ExecutionResult.cancelled_result("c"),
            ExecutionResult.skipped_result("d"),
        ]
    )
    assert len(batch) == 4
    assert batch.success_count == 1
    assert batch.failure_count == 1
    assert batch.cancelled_count == 1
    assert batch.any_failure
    assert not batch.all_success
    assert [r.package_name for r in batch.with_status(ExecutionStatus.SKIPPED)] == ["d"]


def test_skips_count_as_success() -> None:
    batch = BatchResult(
        results=[ExecutionResult.success_result("a"), ExecutionResult.skipped_result("b")]
    )
    assert batch.all_success
    assert [r.package_name for r in batch] == ["a", "b"]
