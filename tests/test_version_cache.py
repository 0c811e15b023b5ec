"""Tests for the version listing cache."""

import time
from unittest.mock import patch

from sources.cache import VersionCache
from versioning.models import Branch, ProjectIdentifier, Revision


class TestVersionCache:
    """Tests for VersionCache."""

    def test_set_and_get(self):
        """Test basic set and get operations."""
        cache = VersionCache(default_ttl=60)
        ident = ProjectIdentifier("github.com/x/y")
        versions = [Branch("master", Revision("a" * 40))]

        cache.set(ident, versions)

        assert cache.get(ident) == versions

    def test_get_returns_copy(self):
        """Mutating a returned list does not touch the cache."""
        cache = VersionCache()
        ident = ProjectIdentifier("github.com/x/y")
        cache.set(ident, [Branch("master")])

        cache.get(ident).append(Branch("develop"))

        assert cache.get(ident) == [Branch("master")]

    def test_source_is_part_of_key(self):
        """Forks are cached separately from the canonical source."""
        cache = VersionCache()
        cache.set(ProjectIdentifier("github.com/x/y"), [Branch("master")])

        assert cache.get(ProjectIdentifier("github.com/x/y", "https://fork/y")) is None

    def test_expiry(self):
        """Expired entries are dropped on read."""
        cache = VersionCache(default_ttl=10)
        ident = ProjectIdentifier("github.com/x/y")
        cache.set(ident, [Branch("master")])

        with patch("sources.cache.time.time", return_value=time.time() + 60):
            assert cache.get(ident) is None
        assert len(cache) == 0

    def test_eviction_when_full(self):
        """Oldest entries are evicted past max_entries."""
        cache = VersionCache(max_entries=10)
        for i in range(11):
            cache.set(ProjectIdentifier(f"github.com/x/p{i}"), [])

        assert len(cache) == 10
        assert cache.get(ProjectIdentifier("github.com/x/p0")) is None

    def test_clear(self):
        cache = VersionCache()
        cache.set(ProjectIdentifier("github.com/x/y"), [])
        cache.clear()
        assert len(cache) == 0
