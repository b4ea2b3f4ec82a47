"""Configuration schema for monopub.yaml."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from monopub.versioning.rewrite import BumpPolicy


class VersioningConfig(BaseModel):
    """Version bump and git settings."""

    model_config = ConfigDict(extra="forbid")

    tag_format: str = Field(default="v{version}", description="Git tag format")
    commit_message: str = Field(default="v{version}", description="Release commit message")
    bump_dependent_reqs: BumpPolicy = Field(
        default=BumpPolicy.RANGE,
        description="Rewrite policy for requirements on bumped packages",
    )

    @field_validator("tag_format", "commit_message")
    @classmethod
    def _needs_version(cls, value: str) -> str:
        if "{version}" not in value:
            raise ValueError("must contain '{version}'")
        return value


class PublishConfig(BaseModel):
    """Registry publish settings."""

    model_config = ConfigDict(extra="forbid")

    command: str = Field(default="npm publish", description="Publish command run in each package")
    tag: str | None = Field(default=None, description="Distribution tag (--tag)")
    access: str | None = Field(default=None, description="Package access (--access)")
    concurrency: int = Field(default=1, ge=1, description="Parallel publishes")


class ChangelogConfig(BaseModel):
    """Changelog settings."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    filename: str = "CHANGELOG.md"


class MonoPubConfig(BaseModel):
    """Root configuration loaded from monopub.yaml."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    packages: list[str] = Field(default_factory=lambda: ["packages/*"])
    ignore: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    versioning: VersioningConfig = Field(default_factory=VersioningConfig)
    publish: PublishConfig = Field(default_factory=PublishConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)

    @field_validator("packages")
    @classmethod
    def _not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one package pattern is required")
        return value
