"""Source managers: version listing, project root deduction and constraint inference."""

from .base import (
    ConstraintError,
    LockResolutionError,
    ProjectRootError,
    SourceError,
    SourceManager,
)
from .cache import VersionCache
from .deduce import deduce_project_root, default_source_url
from .git import GitSourceManager, parse_ls_remote

__all__ = [
    "ConstraintError",
    "LockResolutionError",
    "ProjectRootError",
    "SourceError",
    "SourceManager",
    "VersionCache",
    "deduce_project_root",
    "default_source_url",
    "GitSourceManager",
    "parse_ls_remote",
]
