"""monopub commands."""

from monopub.commands.base import Command, CommandContext, SyncCommand
from monopub.commands.list import (
    ListCommand,
    ListFormat,
    ListOptions,
    ListResult,
    PackageInfo,
    handle_list_command,
    list_packages,
)
from monopub.commands.publish import (
    PublishCommand,
    PublishOptions,
    PublishResult,
    handle_publish_command,
    publish,
)
from monopub.commands.run import RunCommand, RunOptions, handle_run_script, run_script

__all__ = [
    # Base
    "Command",
    "SyncCommand",
    "CommandContext",
    # Publish
    "PublishCommand",
    "PublishOptions",
    "PublishResult",
    "publish",
    "handle_publish_command",
    # Run
    "RunCommand",
    "RunOptions",
    "run_script",
    "handle_run_script",
    # List
    "ListCommand",
    "ListOptions",
    "ListResult",
    "ListFormat",
    "PackageInfo",
    "list_packages",
    "handle_list_command",
]
