"""Dependency-ordered publishing."""

from monopub.publish.registry import VALID_ACCESS, RegistryPublisher, build_publish_command
from monopub.publish.sequencer import PublishReport, publish_packages, publish_sequence

__all__ = [
    "VALID_ACCESS",
    "PublishReport",
    "RegistryPublisher",
    "build_publish_command",
    "publish_packages",
    "publish_sequence",
]
