"""TTL cache for listed project versions."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from versioning.models import ProjectIdentifier, Version


@dataclass
class CacheEntry:
    """A cached version list with its expiry time."""

    value: List[Version]
    expires_at: float
    created_at: float = field(default_factory=time.time)

    def is_expired(self) -> bool:
        """Check if this entry has expired."""
        return time.time() > self.expires_at


class VersionCache:
    """TTL cache of version listings keyed by project root and source.

    The same project is listed by the tag classifier, the locked-version
    resolver and the constraint inferrer during one import; this keeps that
    to a single remote call.
    """

    def __init__(self, default_ttl: int = 600, max_entries: int = 5000):
        """Initialize the version cache.

        Args:
            default_ttl: Default time-to-live in seconds.
            max_entries: Entry count above which the oldest entries are evicted.
        """
        self._default_ttl = default_ttl
        self._max_entries = max_entries
        self._cache: Dict[str, CacheEntry] = {}

    @staticmethod
    def _make_key(identifier: ProjectIdentifier) -> str:
        return f"{identifier.root}|{identifier.source}"

    def get(self, identifier: ProjectIdentifier) -> Optional[List[Version]]:
        """Return a copy of the cached versions, or None if absent or expired."""
        key = self._make_key(identifier)
        entry = self._cache.get(key)
        if entry is None:
            return None
        if entry.is_expired():
            del self._cache[key]
            return None
        return list(entry.value)

    def set(self, identifier: ProjectIdentifier, versions: List[Version], ttl: Optional[int] = None) -> None:
        """Cache the versions of a project."""
        effective_ttl = ttl if ttl is not None else self._default_ttl
        self._cache[self._make_key(identifier)] = CacheEntry(
            value=list(versions), expires_at=time.time() + effective_ttl
        )
        if len(self._cache) > self._max_entries:
            self._evict_oldest(max(1, self._max_entries // 10))

    def clear(self) -> None:
        """Clear all cached entries."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def _evict_oldest(self, count: int) -> None:
        """Evict the oldest entries."""
        sorted_keys = sorted(self._cache.keys(), key=lambda k: self._cache[k].created_at)
        for key in sorted_keys[:count]:
            del self._cache[key]
