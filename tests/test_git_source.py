"""Tests for the git-backed source manager."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from constants import Constants
from sources.base import SourceError
from sources.cache import VersionCache
from sources.git import GitSourceManager, parse_ls_remote
from versioning.models import Branch, BranchConstraint, ProjectIdentifier, Revision, VersionType

LS_REMOTE = "\n".join([
    "1111111111111111111111111111111111111111\trefs/heads/master",
    "2222222222222222222222222222222222222222\trefs/heads/develop",
    "3333333333333333333333333333333333333333\trefs/tags/v1.0.0",
    "4444444444444444444444444444444444444444\trefs/tags/v1.1.0",
    "5555555555555555555555555555555555555555\trefs/tags/v1.1.0^{}",
    "6666666666666666666666666666666666666666\trefs/tags/release-7",
    "",
])


def _completed(stdout="", stderr="", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestParseLsRemote:
    """Parsing of ls-remote output."""

    def test_tags_then_branches(self):
        versions = parse_ls_remote(LS_REMOTE)
        assert [str(v) for v in versions] == ["v1.0.0", "v1.1.0", "release-7", "master", "develop"]

    def test_annotated_tags_use_peeled_commit(self):
        versions = {str(v): v for v in parse_ls_remote(LS_REMOTE)}
        assert versions["v1.1.0"].revision == Revision("5" * 40)
        assert versions["v1.0.0"].revision == Revision("3" * 40)

    def test_tag_kinds(self):
        versions = {str(v): v for v in parse_ls_remote(LS_REMOTE)}
        assert versions["v1.0.0"].type == VersionType.SEMVER
        assert versions["release-7"].type == VersionType.VERSION
        assert versions["master"] == Branch("master", Revision("1" * 40))

    def test_ignores_malformed_lines(self):
        assert parse_ls_remote("garbage\n\n") == []


class TestGitSourceManager:
    """ls-remote invocation, caching and failures."""

    @patch("sources.git.subprocess.run")
    def test_list_versions_runs_ls_remote(self, mock_run):
        mock_run.return_value = _completed(stdout=LS_REMOTE)
        sm = GitSourceManager(cache=VersionCache())

        versions = sm.list_versions(ProjectIdentifier("github.com/x/y"))

        assert len(versions) == 5
        cmd = mock_run.call_args[0][0]
        assert cmd == ["git", "ls-remote", "--heads", "--tags", "https://github.com/x/y"]
        assert mock_run.call_args.kwargs["env"]["GIT_TERMINAL_PROMPT"] == "0"

    @patch("sources.git.subprocess.run")
    def test_alternate_source_is_used(self, mock_run):
        mock_run.return_value = _completed(stdout=LS_REMOTE)
        sm = GitSourceManager(cache=VersionCache())

        sm.list_versions(ProjectIdentifier("github.com/x/y", "https://example.com/fork/y.git"))

        assert mock_run.call_args[0][0][-1] == "https://example.com/fork/y.git"

    @patch("sources.git.subprocess.run")
    def test_results_are_cached(self, mock_run):
        mock_run.return_value = _completed(stdout=LS_REMOTE)
        sm = GitSourceManager(cache=VersionCache())
        ident = ProjectIdentifier("github.com/x/y")

        sm.list_versions(ident)
        sm.list_versions(ident)

        assert mock_run.call_count == 1

    @patch("sources.git.subprocess.run")
    def test_nonzero_exit_raises(self, mock_run):
        mock_run.return_value = _completed(stderr="fatal: repository not found\n", returncode=128)
        sm = GitSourceManager(cache=VersionCache())

        with pytest.raises(SourceError, match="repository not found"):
            sm.list_versions(ProjectIdentifier("github.com/x/missing"))

    @patch("sources.git.subprocess.run", side_effect=FileNotFoundError("git"))
    def test_missing_git_raises(self, _mock_run):
        sm = GitSourceManager(cache=VersionCache())
        with pytest.raises(SourceError, match="not found"):
            sm.list_versions(ProjectIdentifier("github.com/x/y"))

    @patch("sources.git.subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="git", timeout=1))
    def test_timeout_raises(self, _mock_run):
        sm = GitSourceManager(cache=VersionCache())
        with pytest.raises(SourceError, match="timed out"):
            sm.list_versions(ProjectIdentifier("github.com/x/y"))

    @patch("sources.git.subprocess.run")
    def test_infer_constraint_lists_versions(self, mock_run):
        mock_run.return_value = _completed(stdout=LS_REMOTE)
        sm = GitSourceManager(cache=VersionCache())

        c = sm.infer_constraint("develop", ProjectIdentifier("github.com/x/y"))

        assert c == BranchConstraint("develop")

    def test_deduce_project_root(self):
        assert GitSourceManager().deduce_project_root("github.com/x/y/sub") == "github.com/x/y"


class TestGitHubListing:
    """REST API listing for github.com projects."""

    def _client(self, tags, branches):
        client = MagicMock()
        client.get_tags.return_value = tags
        client.get_branches.return_value = branches
        return client

    @patch("sources.git.subprocess.run")
    def test_uses_api_when_enabled(self, mock_run):
        Constants.GITHUB_API_ENABLED = True
        client = self._client(
            [{"name": "v1.0.0", "commit": {"sha": "a" * 40}}],
            [{"name": "main", "commit": {"sha": "b" * 40}}, {"name": "broken"}],
        )
        sm = GitSourceManager(cache=VersionCache(), github=client)

        versions = sm.list_versions(ProjectIdentifier("github.com/x/y"))

        mock_run.assert_not_called()
        client.get_tags.assert_called_once_with("x", "y")
        assert [str(v) for v in versions] == ["v1.0.0", "main"]

    @patch("sources.git.subprocess.run")
    def test_alternate_source_bypasses_api(self, mock_run):
        Constants.GITHUB_API_ENABLED = True
        mock_run.return_value = _completed(stdout=LS_REMOTE)
        client = self._client([], [])
        sm = GitSourceManager(cache=VersionCache(), github=client)

        sm.list_versions(ProjectIdentifier("github.com/x/y", "https://example.com/y.git"))

        client.get_tags.assert_not_called()
        mock_run.assert_called_once()

    def test_api_failure_raises(self):
        Constants.GITHUB_API_ENABLED = True
        sm = GitSourceManager(cache=VersionCache(), github=self._client(None, []))
        with pytest.raises(SourceError):
            sm.list_versions(ProjectIdentifier("github.com/x/y"))
