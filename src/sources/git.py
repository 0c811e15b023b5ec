"""Source manager backed by ``git ls-remote`` and, optionally, the GitHub API.

Only refs are listed; nothing is cloned or fetched.
"""
from __future__ import annotations

import logging
import os
import subprocess
from typing import Dict, List, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from repository.github import GitHubClient
from versioning.models import Branch, Constraint, ProjectIdentifier, Revision, Version
from versioning.parser import infer_constraint
from versioning.semver import make_tag

from .base import SourceError, SourceManager
from .cache import VersionCache
from .deduce import deduce_project_root, default_source_url

logger = logging.getLogger(__name__)

_HEADS = "refs/heads/"
_TAGS = "refs/tags/"
_PEELED = "^{}"


def parse_ls_remote(output: str) -> List[Version]:
    """Parse ``git ls-remote`` output into paired branches and tags.

    Annotated tags are paired with the commit they point to (the peeled
    ``^{}`` line) rather than with the tag object.
    """
    branches: Dict[str, str] = {}
    tags: Dict[str, str] = {}
    peeled: Dict[str, str] = {}

    for line in output.splitlines():
        parts = line.strip().split(None, 1)
        if len(parts) != 2:
            continue
        sha, ref = parts
        if ref.startswith(_HEADS):
            branches[ref[len(_HEADS):]] = sha
        elif ref.startswith(_TAGS):
            name = ref[len(_TAGS):]
            if name.endswith(_PEELED):
                peeled[name[:-len(_PEELED)]] = sha
            else:
                tags[name] = sha

    versions: List[Version] = []
    for name, sha in tags.items():
        versions.append(make_tag(name, Revision(peeled.get(name, sha))))
    for name, sha in branches.items():
        versions.append(Branch(name, Revision(sha)))
    return versions


class GitSourceManager(SourceManager):
    """Source manager that lists refs of remote repositories.

    github.com projects are listed through the REST API when
    ``Constants.GITHUB_API_ENABLED`` is set and no alternate source is given;
    everything else goes through ``git ls-remote``.
    """

    def __init__(
        self,
        cache: Optional[VersionCache] = None,
        github: Optional[GitHubClient] = None,
        git_binary: Optional[str] = None,
    ):
        self.cache = cache if cache is not None else VersionCache(Constants.VERSION_CACHE_TTL_SEC)
        self.github = github
        self.git_binary = git_binary or Constants.GIT_BINARY

    def deduce_project_root(self, import_path: str) -> str:
        return deduce_project_root(import_path)

    def infer_constraint(self, hint: str, identifier: ProjectIdentifier) -> Constraint:
        return infer_constraint(hint, lambda: self.list_versions(identifier))

    def list_versions(self, identifier: ProjectIdentifier) -> List[Version]:
        cached = self.cache.get(identifier)
        if cached is not None:
            return cached

        if self._use_github(identifier):
            versions = self._list_github(identifier)
        else:
            versions = self._list_git(identifier)

        self.cache.set(identifier, versions)
        return list(versions)

    def _use_github(self, identifier: ProjectIdentifier) -> bool:
        return (
            Constants.GITHUB_API_ENABLED
            and not identifier.source
            and identifier.root.startswith("github.com/")
        )

    def _list_git(self, identifier: ProjectIdentifier) -> List[Version]:
        url = identifier.source or default_source_url(identifier.root)
        cmd = [self.git_binary, "ls-remote", "--heads", "--tags", url]
        with Timer() as t:
            try:
                result = subprocess.run(  # noqa: S603
                    cmd,
                    capture_output=True,
                    text=True,
                    timeout=Constants.GIT_TIMEOUT_SEC,
                    check=False,
                    env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
                )
            except FileNotFoundError as exc:
                raise SourceError(f"{self.git_binary} executable not found") from exc
            except subprocess.TimeoutExpired as exc:
                raise SourceError(
                    f"listing refs of {safe_url(url)} timed out after {Constants.GIT_TIMEOUT_SEC} seconds"
                ) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "git ls-remote finished",
                extra=extra_context(
                    event="vcs_request",
                    component="git_source",
                    action="ls_remote",
                    outcome="success" if result.returncode == 0 else "error",
                    duration_ms=t.duration_ms(),
                    target=safe_url(url),
                ),
            )
        if result.returncode != 0:
            detail = (result.stderr or "").strip().splitlines()
            raise SourceError(
                f"git ls-remote {safe_url(url)} failed: {detail[-1] if detail else result.returncode}"
            )
        return parse_ls_remote(result.stdout)

    def _list_github(self, identifier: ProjectIdentifier) -> List[Version]:
        client = self.github if self.github is not None else GitHubClient()
        _, owner, repo = identifier.root.split("/", 2)
        tags = client.get_tags(owner, repo)
        branches = client.get_branches(owner, repo)
        if tags is None or branches is None:
            raise SourceError(f"GitHub API request for {identifier.root} failed")

        versions: List[Version] = []
        for item in tags:
            sha = (item.get("commit") or {}).get("sha")
            if item.get("name") and sha:
                versions.append(make_tag(item["name"], Revision(sha)))
        for item in branches:
            sha = (item.get("commit") or {}).get("sha")
            if item.get("name") and sha:
                versions.append(Branch(item["name"], Revision(sha)))
        return versions
