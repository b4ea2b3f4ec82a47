"""Tests for config schema module."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from monopub.config.schema import (
    ChangelogConfig,
    MonoPubConfig,
    PublishConfig,
    VersioningConfig,
)
from monopub.versioning import BumpPolicy


class TestVersioningConfig:
    """Tests for VersioningConfig."""

    def test_defaults(self) -> None:
        config = VersioningConfig()
        assert config.tag_format == "v{version}"
        assert config.commit_message == "v{version}"
        assert config.bump_dependent_reqs is BumpPolicy.RANGE

    def test_policy_from_string(self) -> None:
        config = VersioningConfig(bump_dependent_reqs="exact")
        assert config.bump_dependent_reqs is BumpPolicy.EXACT

    def test_unknown_policy(self) -> None:
        with pytest.raises(ValidationError):
            VersioningConfig(bump_dependent_reqs="loose")

    def test_tag_format_needs_version(self) -> None:
        """Tag format without a version placeholder is rejected."""
        with pytest.raises(ValidationError, match="version"):
            VersioningConfig(tag_format="release")


class TestPublishConfig:
    """Tests for PublishConfig."""

    def test_defaults(self) -> None:
        config = PublishConfig()
        assert config.command == "npm publish"
        assert config.tag is None
        assert config.access is None
        assert config.concurrency == 1

    def test_concurrency_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            PublishConfig(concurrency=0)


class TestMonoPubConfig:
    """Tests for MonoPubConfig."""

    def test_minimal(self) -> None:
        config = MonoPubConfig()
        assert config.packages == ["packages/*"]
        assert config.ignore == []
        assert config.env == {}
        assert config.changelog == ChangelogConfig()

    def test_full(self) -> None:
        config = MonoPubConfig.model_validate(
            {
                "name": "repo",
                "packages": ["packages/*", "tools/*"],
                "ignore": ["packages/legacy"],
                "env": {"NODE_ENV": "production"},
                "versioning": {"tag_format": "release-{version}"},
                "publish": {"command": "yarn publish", "access": "public", "concurrency": 3},
                "changelog": {"enabled": True, "filename": "HISTORY.md"},
            }
        )
        assert config.packages == ["packages/*", "tools/*"]
        assert config.versioning.tag_format == "release-{version}"
        assert config.publish.concurrency == 3
        assert config.changelog.filename == "HISTORY.md"

    def test_empty_packages_rejected(self) -> None:
        with pytest.raises(ValidationError, match="package pattern"):
            MonoPubConfig(packages=[])

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            MonoPubConfig.model_validate({"scripts": {"test": "jest"}})
