"""Source manager interface and the errors raised across the import pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from versioning.models import Constraint, ProjectIdentifier, Revision, Version
from versioning.parser import ConstraintError


class SourceError(RuntimeError):
    """Raised when versions cannot be listed or a source cannot be reached."""


class LockResolutionError(SourceError):
    """Raised when a locked revision cannot be matched to a version.

    ``fallback`` is the bare revision a caller may still lock to.
    """

    def __init__(self, message: str, fallback: Revision):
        super().__init__(message)
        self.fallback = fallback


class ProjectRootError(ValueError):
    """Raised when an import path cannot be mapped to a project root."""


class SourceManager(ABC):
    """Lists versions and deduces project identity for remote projects."""

    @abstractmethod
    def list_versions(self, identifier: ProjectIdentifier) -> List[Version]:
        """Return every known tag and branch of the project, paired with its revision.

        Raises:
            SourceError: if the versions cannot be listed.
        """

    @abstractmethod
    def deduce_project_root(self, import_path: str) -> str:
        """Map an import path to the root of the project that contains it.

        Raises:
            ProjectRootError: if the path does not name a known project.
        """

    @abstractmethod
    def infer_constraint(self, hint: str, identifier: ProjectIdentifier) -> Constraint:
        """Parse a constraint hint for a project.

        Raises:
            ConstraintError: if the hint is not a valid constraint for the project.
        """


__all__ = [
    "ConstraintError",
    "LockResolutionError",
    "ProjectRootError",
    "SourceError",
    "SourceManager",
]
