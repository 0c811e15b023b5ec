"""Data models for versions, constraints and project identity.

Versions and constraints are closed unions of frozen dataclasses:

    Version    = Revision | Branch | Tag
    Constraint = AnyConstraint | ExactConstraint | BranchConstraint | RangeConstraint

Code that needs to branch on the variant dispatches with ``isinstance`` over
these classes only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

import semantic_version


class VersionType(Enum):
    """Kind of a version label."""
    REVISION = "revision"
    BRANCH = "branch"
    VERSION = "version"  # plain, non-semver tag
    SEMVER = "semver"


@dataclass(frozen=True)
class ProjectIdentifier:
    """A project root and, optionally, the fork/mirror it is fetched from.

    Identity is the root alone; ``source`` only changes the fetch location.
    """
    root: str
    source: str = field(default="", compare=False)

    def __str__(self) -> str:
        if self.source:
            return f"{self.root}({self.source})"
        return self.root


@dataclass(frozen=True)
class Revision:
    """An immutable commit identifier."""
    value: str

    @property
    def type(self) -> VersionType:
        return VersionType.REVISION

    @property
    def revision(self) -> "Revision":
        return self

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Branch:
    """A named, moving pointer, optionally paired with the revision it resolved to."""
    name: str
    revision: Optional[Revision] = None

    @property
    def type(self) -> VersionType:
        return VersionType.BRANCH

    def pair(self, revision: Revision) -> "Branch":
        return Branch(self.name, revision)

    def unpair(self) -> "Branch":
        return Branch(self.name)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Tag:
    """A human-assigned label; ``semver`` is set when the name is a semantic version."""
    name: str
    revision: Optional[Revision] = None
    semver: Optional[semantic_version.Version] = None

    @property
    def type(self) -> VersionType:
        return VersionType.SEMVER if self.semver is not None else VersionType.VERSION

    def pair(self, revision: Revision) -> "Tag":
        return Tag(self.name, revision, self.semver)

    def unpair(self) -> "Tag":
        return Tag(self.name, None, self.semver)

    def __str__(self) -> str:
        return self.name


Version = Union[Revision, Branch, Tag]


def unpair(version: Version) -> Version:
    """Drop the revision from a paired version; revisions are returned as-is."""
    if isinstance(version, Revision):
        return version
    return version.unpair()


def is_paired(version: Version) -> bool:
    """Return True for a label that carries its revision."""
    return not isinstance(version, Revision) and version.revision is not None


def format_version(version: Optional[Version]) -> str:
    """Render a version for messages, e.g. ``master@deadbeef`` for a paired branch."""
    if version is None:
        return "<none>"
    if is_paired(version):
        return f"{version}@{version.revision}"
    return str(version)


@dataclass(frozen=True)
class AnyConstraint:
    """Admits every version."""

    def __str__(self) -> str:
        return "*"


@dataclass(frozen=True)
class ExactConstraint:
    """Admits exactly one point: a revision or a tag."""
    version: Union[Revision, Tag]

    def __str__(self) -> str:
        return str(self.version)


@dataclass(frozen=True)
class BranchConstraint:
    """Admits a branch by name, whatever revision it points to."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class RangeConstraint:
    """Admits semantic versions inside an npm-style range expression."""
    raw: str
    spec: semantic_version.NpmSpec = field(compare=False, repr=False)

    def __str__(self) -> str:
        return self.raw


Constraint = Union[AnyConstraint, ExactConstraint, BranchConstraint, RangeConstraint]

ANY = AnyConstraint()
