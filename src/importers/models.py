"""Data models for importing dependency records from foreign tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from versioning.models import ANY, Constraint, ProjectIdentifier, Version


@dataclass(frozen=True)
class ImportedPackage:
    """A package reference read from another tool's configuration."""
    name: str  # package path, not necessarily the project root
    lock_hint: str = ""  # revision or tag
    source: str = ""  # alternate source, or fork
    constraint_hint: str = ""  # branch or version


@dataclass
class ImportedProject:
    """The consolidated view of every imported package under one project root."""
    root: str
    name: str
    lock_hint: str = ""
    source: str = ""
    constraint_hint: str = ""


@dataclass(frozen=True)
class ProjectProperties:
    """Manifest entry for one project."""
    source: str = ""
    constraint: Constraint = ANY


@dataclass
class Manifest:
    """Desired constraints keyed by project root."""
    constraints: Dict[str, ProjectProperties] = field(default_factory=dict)


@dataclass(frozen=True)
class LockedProject:
    """A project pinned to a concrete version."""
    identifier: ProjectIdentifier
    version: Version
    packages: List[str] = field(default_factory=list)


@dataclass
class Lock:
    """Locked projects in import order."""
    projects: List[LockedProject] = field(default_factory=list)


class DecisionOutcome(Enum):
    """What happened to a project's constraint and lock during import."""
    ACCEPTED = "accepted"
    DISCARDED_PINNED = "discarded_pinned"
    DISCARDED_CONFLICT = "discarded_conflict"
    DEGRADED_TO_REVISION = "degraded_to_revision"
    INFERENCE_FAILED = "inference_failed"
    LOCK_RESOLUTION_FAILED = "lock_resolution_failed"


@dataclass
class ImportDecision:
    """Per-project record of the constraint and version chosen, and why."""
    identifier: ProjectIdentifier
    constraint: Constraint = ANY
    version: Optional[Version] = None
    outcomes: List[DecisionOutcome] = field(default_factory=list)
    discarded_constraint: Optional[Constraint] = None
    error: Optional[str] = None
