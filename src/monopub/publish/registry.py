"""Registry publish command."""

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable

from monopub.execution.results import ExecutionResult
from monopub.execution.runner import run_in_package
from monopub.workspace.package import Package

logger = logging.getLogger(__name__)

VALID_ACCESS = ("public", "private")


def build_publish_command(
    base: str = "npm publish",
    *,
    tag: str | None = None,
    otp: str | None = None,
    access: str | None = None,
) -> str:
    """Build the publish command line.

    ``access`` is only passed through when it is ``public`` or
    ``private``; anything else is dropped with a warning.

    Examples:
        build_publish_command(tag="next") -> "npm publish --tag next"
        build_publish_command(access="bogus") -> "npm publish"
    """
    parts = [base]
    if tag:
        parts.append(f"--tag {shlex.quote(tag)}")
    if otp:
        parts.append(f"--otp {shlex.quote(otp)}")
    if access in VALID_ACCESS:
        parts.append(f"--access {access}")
    elif access:
        logger.warning("Ignoring unknown access level %r", access)
    return " ".join(parts)


class RegistryPublisher:
    """Publishes one package by running the publish command in its directory."""

    def __init__(
        self,
        command: str,
        *,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        output_handler: Callable[[str, str, bool], None] | None = None,
    ) -> None:
        self.command = command
        self.env = env
        self.timeout = timeout
        self.output_handler = output_handler

    async def publish(self, package: Package) -> ExecutionResult:
        """Run the publish command for ``package``."""
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

        logger.info("Publishing %s@%s", package.name, package.version)
        result = await run_in_package(
            package,
            self.command,
            env=self.env,
            timeout=self.timeout,
            on_stdout=on_out,
            on_stderr=on_err,
        )
        if result.failed:
            logger.error("Publishing %s failed (exit %d)", package.name, result.exit_code)
        return result
