"""Importers that turn other dependency managers' configuration into a manifest and lock."""

from .base import (
    BaseImporter,
    constraint_from_version,
    is_constraint_pinned,
    test_constraint,
)
from .feedback import ConstraintFeedback, LockedProjectFeedback, log_feedback
from .models import (
    DecisionOutcome,
    ImportDecision,
    ImportedPackage,
    ImportedProject,
    Lock,
    LockedProject,
    Manifest,
    ProjectProperties,
)

__all__ = [
    "BaseImporter",
    "constraint_from_version",
    "is_constraint_pinned",
    "test_constraint",
    "ConstraintFeedback",
    "LockedProjectFeedback",
    "log_feedback",
    "DecisionOutcome",
    "ImportDecision",
    "ImportedPackage",
    "ImportedProject",
    "Lock",
    "LockedProject",
    "Manifest",
    "ProjectProperties",
]
