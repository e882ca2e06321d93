"""Semantic version parsing and incrementing.

Versions have the form ``major.minor.patch[-prerelease]``. The prerelease
suffix is opaque: it is kept for display and dropped before any arithmetic.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from functools import total_ordering

from release_ip.exceptions import MalformedVersionError


class BumpType(StrEnum):
    """Which component of the version to increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


@total_ordering
@dataclass(frozen=True)
class Version:
    """An immutable semantic version."""

    major: int
    minor: int
    patch: int
    prerelease: str | None = None

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise MalformedVersionError(f"Version fields must be non-negative: {self.core}")

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse ``major.minor.patch[-prerelease]``.

        Raises:
            MalformedVersionError: If the core is not three numeric fields
        """
        text = text.strip()
        core, sep, prerelease = text.partition("-")
        fields = core.split(".")
        if len(fields) != 3 or not all(field.isascii() and field.isdigit() for field in fields):
            raise MalformedVersionError(
                f"Invalid version {text!r}: expected MAJOR.MINOR.PATCH with numeric fields"
            )
        if sep and not prerelease:
            raise MalformedVersionError(f"Invalid version {text!r}: empty pre-release suffix")
        major, minor, patch = (int(field) for field in fields)
        return cls(major, minor, patch, prerelease or None)

    @classmethod
    def from_tag(cls, tag: str, prefix: str = "v") -> Version:
        """Parse a version out of a tag name such as ``v1.2.3``."""
        if prefix and not tag.startswith(prefix):
            raise MalformedVersionError(f"Tag {tag!r} does not start with prefix {prefix!r}")
        return cls.parse(tag[len(prefix) :])

    @property
    def core(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def bump(self, kind: BumpType) -> Version:
        """Return the next version for ``kind``; the prerelease is dropped."""
        match kind:
            case BumpType.MAJOR:
                return Version(self.major + 1, 0, 0)
            case BumpType.MINOR:
                return Version(self.major, self.minor + 1, 0)
            case BumpType.PATCH:
                return Version(self.major, self.minor, self.patch + 1)
        raise ValueError(f"Unknown bump type: {kind!r}")

    def with_prerelease(self, label: str | None) -> Version:
        return replace(self, prerelease=label or None)

    def _sort_key(self) -> tuple[int, int, int, bool, str]:
        return (self.major, self.minor, self.patch, self.prerelease is None, self.prerelease or "")

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        if self.prerelease:
            return f"{self.core}-{self.prerelease}"
        return self.core


def parse_version(text: str) -> Version:
    """Parse a version string. See :meth:`Version.parse`."""
    return Version.parse(text)
