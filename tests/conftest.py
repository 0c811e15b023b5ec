"""Shared fixtures for the importer and CLI tests."""

from typing import Dict, List, Optional

import pytest

from constants import Constants
from sources.base import SourceError, SourceManager
from sources.deduce import deduce_project_root
from versioning.models import Branch, ProjectIdentifier, Revision, Version
from versioning.parser import infer_constraint
from versioning.semver import make_tag

REV_A = "a" * 40
REV_B = "b" * 40
REV_C = "c" * 40
REV_D = "deadbeef" + "0" * 32


class FakeSourceManager(SourceManager):
    """Scripted source manager: versions per root, optional listing failures."""

    def __init__(self, versions: Optional[Dict[str, List[Version]]] = None, failing=()):
        self.versions = versions or {}
        self.failing = set(failing)
        self.list_calls: List[str] = []

    def list_versions(self, identifier: ProjectIdentifier) -> List[Version]:
        self.list_calls.append(identifier.root)
        if identifier.root in self.failing:
            raise SourceError(f"cannot reach {identifier.root}")
        return list(self.versions.get(identifier.root, []))

    def deduce_project_root(self, import_path: str) -> str:
        return deduce_project_root(import_path)

    def infer_constraint(self, hint, identifier):
        return infer_constraint(hint, lambda: self.list_versions(identifier))


def tag(name: str, rev: str) -> Version:
    return make_tag(name, Revision(rev))


def branch(name: str, rev: str) -> Version:
    return Branch(name, Revision(rev))


@pytest.fixture
def fake_sm():
    """Source manager with a handful of projects and their refs."""
    return FakeSourceManager({
        "github.com/x/y": [
            tag("v1.0.0", REV_A),
            tag("v1.2.0", REV_B),
            tag("v2.0.0", REV_C),
            branch("master", REV_D),
        ],
        "github.com/plain/tags": [
            tag("release-7", REV_A),
            branch("develop", REV_B),
        ],
    })


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo Constants mutations made by config and CLI tests."""
    saved = {k: v for k, v in vars(Constants).items() if k.isupper()}
    yield
    for key, value in saved.items():
        setattr(Constants, key, value)
