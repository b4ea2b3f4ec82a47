"""Command execution across packages."""

from monopub.execution.parallel import ParallelExecutor, PackageTask
from monopub.execution.results import BatchResult, ExecutionResult, ExecutionStatus
from monopub.execution.runner import CommandOutput, run_command, run_in_package

__all__ = [
    "BatchResult",
    "CommandOutput",
    "ExecutionResult",
    "ExecutionStatus",
    "PackageTask",
    "ParallelExecutor",
    "run_command",
    "run_in_package",
]
