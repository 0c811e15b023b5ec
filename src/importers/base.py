"""Common implementation for importing from other dependency managers.

Importers for specific tools read that tool's configuration into a flat list
of ImportedPackage records and hand them to BaseImporter, which consolidates
them by project root and decides the manifest constraint and locked version
for every project.

Rules applied per project:
- When a constraint is ignored, default to ``*``.
- HEAD revisions default to the matching branch.
- Semantic versions default to ``^VERSION``.
- Revision constraints are ignored.
- Versions that don't satisfy the constraint drop the constraint.
- Untagged revisions ignore non-branch constraint hints.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from sources.base import LockResolutionError, ProjectRootError, SourceError, SourceManager
from versioning.matching import matches
from versioning.models import (
    ANY,
    AnyConstraint,
    Branch,
    BranchConstraint,
    Constraint,
    ExactConstraint,
    ProjectIdentifier,
    RangeConstraint,
    Revision,
    Tag,
    Version,
    VersionType,
    format_version,
    unpair,
)
from versioning.semver import caret_constraint, sort_for_upgrade

from .feedback import ConstraintFeedback, FeedbackSink, LockedProjectFeedback, log_feedback
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

logger = logging.getLogger(__name__)


def is_constraint_pinned(constraint: Constraint) -> bool:
    """Return True if the constraint already names a single revision or tag."""
    if isinstance(constraint, ExactConstraint):
        return True
    if isinstance(constraint, (AnyConstraint, BranchConstraint, RangeConstraint)):
        return False
    raise TypeError(f"unsupported constraint type: {type(constraint).__name__}")


def test_constraint(constraint: Constraint, version: Optional[Version]) -> bool:
    """Return True if the constraint won't invalidate the locked version.

    Branch constraints are assumed to be satisfied by whatever the branch
    currently points to.
    """
    if isinstance(constraint, BranchConstraint):
        return True
    return matches(constraint, version)


# pytest would otherwise collect the predicate above as a test function.
test_constraint.__test__ = False  # type: ignore[attr-defined]


def constraint_from_version(version: Version) -> Optional[Constraint]:
    """Derive the default constraint for a locked version; None for bare revisions."""
    label = unpair(version)
    if isinstance(label, Revision):
        return None
    if isinstance(label, Branch):
        return BranchConstraint(label.name)
    if isinstance(label, Tag):
        if label.semver is not None:
            return caret_constraint(label.semver)
        return ExactConstraint(label)
    raise TypeError(f"unsupported version type: {type(version).__name__}")


class BaseImporter:
    """Consolidates imported packages into a manifest and lock.

    A fresh instance owns the manifest and lock of exactly one import run.
    """

    def __init__(
        self,
        source_manager: SourceManager,
        verbose: bool = False,
        feedback: Optional[FeedbackSink] = None,
    ):
        self.sm = source_manager
        self.verbose = verbose
        self.feedback = feedback or log_feedback
        self.manifest = Manifest()
        self.lock = Lock()

    def is_tag(self, identifier: ProjectIdentifier, value: str) -> Tuple[bool, Optional[Version]]:
        """Determine if the value names a tag (plain or semver) of the project.

        Raises:
            SourceError: if the project's versions cannot be listed.
        """
        try:
            versions = self.sm.list_versions(identifier)
        except SourceError as exc:
            raise SourceError(
                f"unable to list versions for {identifier.root}({identifier.source})"
            ) from exc

        for version in versions:
            if version.type not in (VersionType.VERSION, VersionType.SEMVER):
                continue
            if value == str(version):
                return True, version

        return False, None

    def lookup_version_for_locked_project(
        self,
        identifier: ProjectIdentifier,
        constraint: Optional[Constraint],
        revision: Revision,
    ) -> Version:
        """Find the best version to lock for a revision.

        First try matching the revision to a version, then a branch named by
        the constraint, then finally the bare revision.

        Raises:
            LockResolutionError: if versions cannot be listed; ``fallback`` is
                the bare revision.
        """
        try:
            versions = list(self.sm.list_versions(identifier))
        except SourceError as exc:
            raise LockResolutionError(
                f"Unable to lookup the version represented by {revision} in "
                f"{identifier.root}({identifier.source}). Falling back to locking the revision only.",
                fallback=revision,
            ) from exc

        sort_for_upgrade(versions)
        matched: List[Version] = []
        branch_constraint: Optional[Branch] = None
        for version in versions:
            if version.revision == revision:
                matched.append(version)
            if (
                constraint is not None
                and isinstance(version, Branch)
                and version.name == str(constraint)
            ):
                branch_constraint = version

        # Narrow down the matches with the constraint, otherwise take the first.
        if matched:
            if constraint is not None:
                for version in matched:
                    if test_constraint(constraint, version):
                        return version
            return matched[0]

        if branch_constraint is not None:
            return branch_constraint.unpair().pair(revision)

        return revision

    def load_packages(self, packages: Sequence[ImportedPackage]) -> List[ImportedProject]:
        """Consolidate package references into one project per root.

        Projects keep the order in which their root was first seen so that
        feedback printed while processing them is stable.

        Raises:
            ProjectRootError: if any package's project root cannot be deduced.
        """
        ordered: List[ImportedProject] = []
        projects: Dict[str, ImportedProject] = {}

        for pkg in packages:
            try:
                root = self.sm.deduce_project_root(pkg.name)
            except (ProjectRootError, SourceError) as exc:
                raise ProjectRootError(f"Cannot determine the project root for {pkg.name}") from exc

            prj = projects.get(root)
            if prj is None:
                prj = ImportedProject(
                    root=root,
                    name=root,
                    lock_hint=pkg.lock_hint,
                    source=pkg.source,
                    constraint_hint=pkg.constraint_hint,
                )
                ordered.append(prj)
                projects[root] = prj
                continue

            # The config found first wins, but each field can still be filled
            # in later since some tools split config and lock files.
            if not prj.source and pkg.source:
                prj.source = pkg.source
            if not prj.constraint_hint and pkg.constraint_hint:
                prj.constraint_hint = pkg.constraint_hint
            if not prj.lock_hint and pkg.lock_hint:
                prj.lock_hint = pkg.lock_hint

        return ordered

    def import_packages(
        self,
        packages: Sequence[ImportedPackage],
        default_constraint_from_lock: bool = True,
    ) -> List[ImportDecision]:
        """Load imported packages into the manifest and lock.

        Args:
            packages: Package records read from the foreign tool.
            default_constraint_from_lock: Derive a constraint from the locked
                version when the record has no constraint hint.

        Returns:
            One decision per project, in import order.

        Raises:
            ProjectRootError: if a project root cannot be deduced.
            SourceError: if versions cannot be listed to classify a lock hint.
        """
        projects = self.load_packages(packages)
        return self.import_projects(projects, default_constraint_from_lock)

    def import_projects(
        self,
        projects: Sequence[ImportedProject],
        default_constraint_from_lock: bool = True,
    ) -> List[ImportDecision]:
        """Decide constraint and lock for already consolidated projects."""
        return [self._import_project(prj, default_constraint_from_lock) for prj in projects]

    def _import_project(self, prj: ImportedProject, default_constraint_from_lock: bool) -> ImportDecision:
        identifier = ProjectIdentifier(prj.root, prj.source)
        decision = ImportDecision(identifier)

        constraint = self._infer_constraint(prj, identifier, decision)

        version: Optional[Version] = None
        if prj.lock_hint:
            is_tag, version = self.is_tag(identifier, prj.lock_hint)

            if not is_tag:
                revision = Revision(prj.lock_hint)
                try:
                    version = self.lookup_version_for_locked_project(identifier, constraint, revision)
                except LockResolutionError as exc:
                    logger.warning("%s", exc)
                    version = None
                    decision.outcomes.append(DecisionOutcome.LOCK_RESOLUTION_FAILED)
                    decision.error = str(exc)
                else:
                    if isinstance(version, Revision):
                        decision.outcomes.append(DecisionOutcome.DEGRADED_TO_REVISION)

            if default_constraint_from_lock and not prj.constraint_hint and version is not None:
                derived = constraint_from_version(version)
                if derived is not None:
                    constraint = derived

        if is_constraint_pinned(constraint):
            if self.verbose:
                logger.info("  Ignoring pinned constraint %s for %s.", constraint, identifier)
            decision.outcomes.append(DecisionOutcome.DISCARDED_PINNED)
            decision.discarded_constraint = constraint
            constraint = ANY

        # Drop constraints that conflict with the locked version so that a
        # later solve doesn't move the lock to satisfy them.
        if not test_constraint(constraint, version):
            if self.verbose:
                logger.info(
                    "  Ignoring constraint %s for %s because it would invalidate the locked version %s.",
                    constraint,
                    identifier,
                    format_version(version),
                )
            decision.outcomes.append(DecisionOutcome.DISCARDED_CONFLICT)
            decision.discarded_constraint = constraint
            constraint = ANY

        self.manifest.constraints[identifier.root] = ProjectProperties(
            source=identifier.source,
            constraint=constraint,
        )
        self.feedback(ConstraintFeedback(identifier, constraint))

        if version is not None:
            self.lock.projects.append(LockedProject(identifier, version))
            self.feedback(LockedProjectFeedback(identifier, version))

        if not decision.outcomes:
            decision.outcomes.append(DecisionOutcome.ACCEPTED)
        decision.constraint = constraint
        decision.version = version

        if is_debug_enabled(logger):
            logger.debug(
                "Imported project",
                extra=extra_context(
                    event="decision",
                    component="importer",
                    action="import_project",
                    outcome=",".join(o.value for o in decision.outcomes),
                    target=identifier.root,
                ),
            )
        return decision

    def _infer_constraint(
        self,
        prj: ImportedProject,
        identifier: ProjectIdentifier,
        decision: ImportDecision,
    ) -> Constraint:
        """Infer the constraint from the hint, falling back to ``*`` on failure."""
        try:
            return self.sm.infer_constraint(prj.constraint_hint, identifier)
        except (ValueError, SourceError) as exc:
            if prj.constraint_hint:
                decision.outcomes.append(DecisionOutcome.INFERENCE_FAILED)
                decision.error = str(exc)
                if self.verbose:
                    logger.info(
                        "  Ignoring constraint hint %r for %s: %s",
                        prj.constraint_hint,
                        identifier,
                        exc,
                    )
            return ANY
