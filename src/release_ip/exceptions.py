"""Exception hierarchy for release-ip.

Every error the tool raises on purpose derives from ReleaseIpError, so the
CLI layer can report it and exit with a non-zero status.
"""

from __future__ import annotations


class ReleaseIpError(Exception):
    """Base class for all release-ip errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# Configuration


class ConfigError(ReleaseIpError):
    """Configuration could not be read."""


class ConfigNotFoundError(ConfigError):
    """A configuration file that was asked for does not exist."""


class ConfigValidationError(ConfigError):
    """Configuration values are invalid."""


# Versions


class MalformedVersionError(ReleaseIpError):
    """A version string does not have three numeric fields."""


# Project files


class ProjectError(ReleaseIpError):
    """Project version files are missing or inconsistent."""


class VersionNotFoundError(ProjectError):
    """No version could be found in a project file."""


# Changelog


class ChangelogError(ReleaseIpError):
    """The changelog could not be processed."""


class MissingUnreleasedSectionError(ChangelogError):
    """The changelog has no '## Unreleased' section."""


# Workflow


class DirtyWorkingTreeError(ReleaseIpError):
    """Release files carry uncommitted changes."""


class UserRejectedError(ReleaseIpError):
    """A confirmation prompt was not answered affirmatively."""


# External commands


class ExternalCommandError(ReleaseIpError):
    """An external command exited with a non-zero status."""

    def __init__(self, message: str, *, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        if self.stderr:
            return f"{self.message}\n{self.stderr.strip()}"
        return self.message


class GitError(ExternalCommandError):
    """A git command failed."""


class PublishError(ExternalCommandError):
    """Publishing the release failed."""
