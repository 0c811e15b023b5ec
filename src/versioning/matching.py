"""Constraint matching rules, one per constraint variant."""

from __future__ import annotations

from typing import Optional

from .models import (
    AnyConstraint,
    Branch,
    BranchConstraint,
    Constraint,
    ExactConstraint,
    RangeConstraint,
    Revision,
    Tag,
    Version,
)


def _tag_equals(want: Tag, got: Tag) -> bool:
    # Semantic versions compare by precedence, so "v1.0.0" and "1.0.0" are the same point.
    if want.semver is not None and got.semver is not None:
        same = want.semver == got.semver
    else:
        same = want.name == got.name
    if not same:
        return False
    if want.revision is not None and got.revision is not None:
        return want.revision == got.revision
    return True


def matches(constraint: Constraint, version: Optional[Version]) -> bool:
    """Return True when the constraint admits the version.

    An unknown version (None) is only admitted by AnyConstraint.
    """
    if isinstance(constraint, AnyConstraint):
        return True
    if version is None:
        return False

    if isinstance(constraint, ExactConstraint):
        want = constraint.version
        if isinstance(want, Revision):
            return version.revision == want
        if isinstance(version, Tag):
            return _tag_equals(want, version)
        return False

    if isinstance(constraint, BranchConstraint):
        return isinstance(version, Branch) and version.name == constraint.name

    if isinstance(constraint, RangeConstraint):
        if not isinstance(version, Tag) or version.semver is None:
            return False
        return constraint.spec.match(version.semver)

    raise TypeError(f"unsupported constraint type: {type(constraint).__name__}")
