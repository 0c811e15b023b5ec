"""Semantic-version helpers backed by the semantic_version library."""

from __future__ import annotations

import functools
import re
from typing import List, Optional

import semantic_version

from .models import RangeConstraint, Revision, Tag, Version, VersionType

_SEMVER_LIKE = re.compile(
    r'^v?\d+(\.\d+){0,2}(-[0-9A-Za-z.\-]+)?(\+[0-9A-Za-z.\-]+)?$'
)
_V_PREFIX = re.compile(r'(?<![0-9A-Za-z])v(?=\d)')

# Releases, then prereleases, then branches, plain tags and revisions.
_RANK_RELEASE = 0
_RANK_PRERELEASE = 1
_UPGRADE_RANK = {
    VersionType.BRANCH: 2,
    VersionType.VERSION: 3,
    VersionType.REVISION: 4,
}


def parse_semver(name: str) -> Optional[semantic_version.Version]:
    """Parse a tag name as a semantic version, tolerating a ``v`` prefix and short forms.

    Returns None for names that are not semantic versions.
    """
    if not name or not _SEMVER_LIKE.match(name):
        return None
    text = name[1:] if name.startswith('v') else name
    try:
        return semantic_version.Version(text)
    except ValueError:
        pass
    try:
        return semantic_version.Version.coerce(text)
    except ValueError:
        return None


def make_tag(name: str, revision: Optional[Revision] = None) -> Tag:
    """Build a Tag, detecting whether its name is a semantic version."""
    return Tag(name, revision, parse_semver(name))


def caret_constraint(version: semantic_version.Version) -> RangeConstraint:
    """Return ``^MAJOR.MINOR.PATCH[-PRE]`` anchored at the given version."""
    base = semantic_version.Version(
        major=version.major,
        minor=version.minor,
        patch=version.patch,
        prerelease=version.prerelease,
    )
    raw = f"^{base}"
    return RangeConstraint(raw, semantic_version.NpmSpec(raw))


def parse_range(text: str) -> RangeConstraint:
    """Parse an npm-style range; ``, `` is accepted as AND and ``v`` prefixes are dropped.

    Raises:
        ValueError: if the text is not a range expression.
    """
    raw = text.strip()
    normalized = re.sub(r'\s*,\s*', ' ', raw)
    normalized = _V_PREFIX.sub('', normalized)
    return RangeConstraint(raw, semantic_version.NpmSpec(normalized))


def _upgrade_rank(version: Version) -> int:
    if isinstance(version, Tag) and version.semver is not None:
        return _RANK_PRERELEASE if version.semver.prerelease else _RANK_RELEASE
    return _UPGRADE_RANK[version.type]


def _upgrade_cmp(left: Version, right: Version) -> int:
    lrank, rrank = _upgrade_rank(left), _upgrade_rank(right)
    if lrank != rrank:
        return -1 if lrank < rrank else 1
    if lrank in (_RANK_RELEASE, _RANK_PRERELEASE):
        # Newest first.
        if left.semver > right.semver:
            return -1
        if left.semver < right.semver:
            return 1
    lname, rname = str(left), str(right)
    if lname != rname:
        return -1 if lname < rname else 1
    return 0


def sort_for_upgrade(versions: List[Version]) -> None:
    """Sort versions in place, in upgrade order.

    Semantic versions come first, newest first, with prereleases after all
    releases. Then branches, plain tags and bare revisions, each ordered by
    name.
    """
    versions.sort(key=functools.cmp_to_key(_upgrade_cmp))
