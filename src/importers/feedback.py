"""User-facing feedback for constraints and locks chosen during an import."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

from constants import DepType
from versioning.models import Constraint, ProjectIdentifier, Revision, Version

logger = logging.getLogger(__name__)

SHORT_REV_LEN = 7


@dataclass(frozen=True)
class ConstraintFeedback:
    """A constraint recorded in the manifest."""
    identifier: ProjectIdentifier
    constraint: Constraint
    dep_type: DepType = DepType.IMPORTED

    def __str__(self) -> str:
        return (
            f"Using {self.constraint} as initial constraint for "
            f"{self.dep_type.value} dep {self.identifier.root}"
        )


@dataclass(frozen=True)
class LockedProjectFeedback:
    """A version recorded in the lock."""
    identifier: ProjectIdentifier
    version: Version
    dep_type: DepType = DepType.IMPORTED

    def __str__(self) -> str:
        revision = self.version.revision
        short = str(revision)[:SHORT_REV_LEN] if revision is not None else "?"
        label = "*" if isinstance(self.version, Revision) else str(self.version)
        return (
            f"Trying {label} ({short}) as initial lock for "
            f"{self.dep_type.value} dep {self.identifier.root}"
        )


FeedbackEvent = Union[ConstraintFeedback, LockedProjectFeedback]
FeedbackSink = Callable[[FeedbackEvent], None]


def log_feedback(event: FeedbackEvent) -> None:
    """Default sink: one INFO line per event."""
    logger.info("  %s", event)
