"""Pydantic models for release-ip configuration.

All settings have defaults that match the conventional layout of an IP
repository: ``VERSION``, ``CHANGELOG.md``, one ``*.core`` descriptor and
``vMAJOR.MINOR.PATCH`` tags.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from release_ip.core.changelog import DEFAULT_SUBSECTIONS
from release_ip.core.version import Version
from release_ip.exceptions import MalformedVersionError


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class VersionConfig(_Section):
    """Where versions live and how they are spelled."""

    tag_prefix: str = "v"
    initial_version: str = "0.0.0"
    dev_suffix: str = "dev"
    version_file: Path = Path("VERSION")
    descriptor: Path | None = None

    @field_validator("initial_version")
    @classmethod
    def _check_initial_version(cls, value: str) -> str:
        try:
            Version.parse(value)
        except MalformedVersionError as e:
            raise ValueError(e.message) from e
        return value

    @field_validator("tag_prefix", "dev_suffix")
    @classmethod
    def _no_whitespace(cls, value: str) -> str:
        if any(char.isspace() for char in value):
            raise ValueError("must not contain whitespace")
        return value


class ChangelogConfig(_Section):
    """Changelog location and the layout of a reopened Unreleased section."""

    path: Path = Path("CHANGELOG.md")
    subsections: list[str] = Field(default_factory=lambda: list(DEFAULT_SUBSECTIONS))
    reopen_after_line: int | None = Field(default=None, ge=0)


class GitConfig(_Section):
    main_branch: str = "main"
    remote: str = "origin"
    release_branch_prefix: str = "release-"


class GitHubConfig(_Section):
    """Publishing through the GitHub CLI."""

    enabled: bool = True
    cli: str = "gh"
    min_cli_major: int = Field(default=1, ge=0)
    release_title: str = "{tag}"

    @field_validator("release_title")
    @classmethod
    def _check_placeholders(cls, value: str) -> str:
        try:
            value.format(tag="v0.0.0", version=Version(0, 0, 0))
        except (AttributeError, KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"invalid release title {value!r}; only {{tag}} and {{version}} are allowed"
            ) from e
        return value


class ReleaseIpConfig(_Section):
    """Top-level release-ip configuration."""

    version: VersionConfig = Field(default_factory=VersionConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)

    @property
    def effective_tag_prefix(self) -> str:
        return self.version.tag_prefix

    @property
    def tag_pattern(self) -> str:
        return f"{self.effective_tag_prefix}*"

    def tag_for(self, version: Version) -> str:
        return f"{self.effective_tag_prefix}{version}"

    def branch_for(self, version: Version) -> str:
        return f"{self.git.release_branch_prefix}{version}"

    def release_title_for(self, version: Version) -> str:
        return self.github.release_title.format(tag=self.tag_for(version), version=version)
