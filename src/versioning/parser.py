"""Constraint-hint parsing.

Turns the free-text constraint hints found in foreign tool configs into
structured constraints.
"""

import re
from typing import Callable, Iterable

from .models import (
    ANY,
    Branch,
    BranchConstraint,
    Constraint,
    ExactConstraint,
    Revision,
    Tag,
    Version,
    VersionType,
)
from .semver import caret_constraint, make_tag, parse_range, parse_semver

_FULL_HASH = re.compile(r'^[0-9a-fA-F]{40}$')


class ConstraintError(ValueError):
    """Raised when a hint cannot be turned into a constraint."""


def is_full_revision(text: str) -> bool:
    """Return True for a 40-character hex commit id."""
    return bool(_FULL_HASH.match(text))


def infer_constraint(hint: str, list_versions: Callable[[], Iterable[Version]]) -> Constraint:
    """Infer a constraint from a hint.

    Tried in order: empty (any), full revision, ``=VERSION`` (exact),
    bare semantic version (implied caret), range expression, then the
    project's branches and plain tags. ``list_versions`` is only called
    when the hint is not self-describing.

    Raises:
        ConstraintError: if nothing matches.
    """
    text = (hint or '').strip()
    if not text or text == '*':
        return ANY

    if is_full_revision(text):
        return ExactConstraint(Revision(text))

    if text.startswith('='):
        exact = text.lstrip('=').strip()
        if parse_semver(exact) is not None:
            return ExactConstraint(make_tag(exact))

    semver = parse_semver(text)
    if semver is not None:
        return caret_constraint(semver)

    try:
        return parse_range(text)
    except ValueError:
        pass

    for version in list_versions():
        if isinstance(version, Branch) and version.name == text:
            return BranchConstraint(text)
        if isinstance(version, Tag) and version.type == VersionType.VERSION and version.name == text:
            return ExactConstraint(version.unpair())

    raise ConstraintError(f"{text} is not a valid version constraint")
