"""Shell command execution inside package directories."""

from __future__ import annotations

import asyncio
import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from monopub.execution.results import ExecutionResult

if TYPE_CHECKING:
    from monopub.workspace.package import Package

LineCallback = Callable[[str], None]


@dataclass
class CommandOutput:
    """Raw outcome of one shell command."""

    exit_code: int
    stdout: str
    stderr: str
    duration_ms: int


async def _pump(
    stream: asyncio.StreamReader,
    callback: LineCallback | None,
    buffer: list[str],
) -> None:
    while line := await stream.readline():
        decoded = line.decode("utf-8", errors="replace")
        buffer.append(decoded)
        if callback:
            callback(decoded.rstrip())


async def run_command(
    command: str,
    cwd: Path,
    *,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
    on_stdout: LineCallback | None = None,
    on_stderr: LineCallback | None = None,
) -> CommandOutput:
    """Run a shell command asynchronously, capturing and streaming output.

    Args:
        command: Shell command to execute.
        cwd: Working directory.
        env: Extra environment variables (merged over the current env).
        timeout: Timeout in seconds; the process is killed when exceeded.
        on_stdout: Called with each stdout line.
        on_stderr: Called with each stderr line.

    Returns:
        Exit code, captured output and duration. A command that cannot be
        started or times out reports exit code -1 with the reason on stderr.
    """
    run_env = {**os.environ, **(env or {})}
    started = time.monotonic()

    def elapsed() -> int:
        return int((time.monotonic() - started) * 1000)

    try:
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=run_env,
        )
    except OSError as e:
        return CommandOutput(-1, "", str(e), elapsed())

    if process.stdout is None or process.stderr is None:
        raise RuntimeError("Process stdout/stderr is None")

    stdout: list[str] = []
    stderr: list[str] = []

    try:
        await asyncio.wait_for(
            asyncio.gather(
                _pump(process.stdout, on_stdout, stdout),
                _pump(process.stderr, on_stderr, stderr),
                process.wait(),
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return CommandOutput(-1, "".join(stdout), f"Command timed out after {timeout}s", elapsed())

    return CommandOutput(process.returncode or 0, "".join(stdout), "".join(stderr), elapsed())


async def run_in_package(
    package: Package,
    command: str,
    *,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
    on_stdout: LineCallback | None = None,
    on_stderr: LineCallback | None = None,
) -> ExecutionResult:
    """Run a command with the package directory as working directory.

    The command sees ``MONOPUB_PACKAGE_NAME``, ``MONOPUB_PACKAGE_PATH`` and
    ``MONOPUB_PACKAGE_VERSION`` in its environment.
    """
    package_env = dict(env or {})
    package_env["MONOPUB_PACKAGE_NAME"] = package.name
    package_env["MONOPUB_PACKAGE_PATH"] = str(package.path)
    package_env["MONOPUB_PACKAGE_VERSION"] = package.version

    output = await run_command(
        command,
        cwd=package.path,
        env=package_env,
        timeout=timeout,
        on_stdout=on_stdout,
        on_stderr=on_stderr,
    )

    if output.exit_code == 0:
        return ExecutionResult.success_result(
            package.name,
            stdout=output.stdout,
            stderr=output.stderr,
            duration_ms=output.duration_ms,
            command=command,
        )
    return ExecutionResult.failure_result(
        package.name,
        exit_code=output.exit_code,
        stdout=output.stdout,
        stderr=output.stderr,
        duration_ms=output.duration_ms,
        command=command,
    )
