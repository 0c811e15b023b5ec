"""GitHub API client for repository refs.

Provides a lightweight REST client for listing the tags and branches of a
GitHub repository together with the commit each one points to.
"""
from __future__ import annotations

import os
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from constants import Constants
from common.http_client import get_json

_NEXT_LINK = re.compile(r'<([^>]+)>\s*;\s*rel="next"')


class GitHubClient:
    """Lightweight REST client for GitHub API operations.

    Supports optional authentication via GITHUB_TOKEN environment variable.
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        """Initialize GitHub client.

        Args:
            base_url: Base URL for GitHub API (defaults to Constants.GITHUB_API_BASE)
            token: GitHub personal access token (defaults to GITHUB_TOKEN env var)
        """
        self.base_url = (base_url or Constants.GITHUB_API_BASE).rstrip('/')
        self.token = token or os.environ.get(Constants.ENV_GITHUB_TOKEN)

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers including authorization if token is available."""
        headers = {'Accept': 'application/vnd.github+json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def _repo_url(self, owner: str, repo: str) -> str:
        return f"{self.base_url}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    def get_tags(self, owner: str, repo: str) -> Optional[List[Dict[str, Any]]]:
        """Fetch repository tags with pagination.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            List of tag dictionaries (``name``, ``commit.sha``), or None on error
        """
        return self._get_paginated_results(f"{self._repo_url(owner, repo)}/tags")

    def get_branches(self, owner: str, repo: str) -> Optional[List[Dict[str, Any]]]:
        """Fetch repository branches with pagination.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            List of branch dictionaries (``name``, ``commit.sha``), or None on error
        """
        return self._get_paginated_results(f"{self._repo_url(owner, repo)}/branches")

    def _get_paginated_results(self, url: str) -> Optional[List[Dict[str, Any]]]:
        """Fetch all pages of a paginated endpoint, following ``Link: rel="next"``.

        Returns:
            List of all results across pages, or None if any page fails
        """
        results: List[Dict[str, Any]] = []
        current_url: Optional[str] = f"{url}?per_page={Constants.REPO_API_PER_PAGE}"

        while current_url:
            status, headers, data = get_json(current_url, headers=self._get_headers())
            if status != 200 or not isinstance(data, list):
                return None
            results.extend(item for item in data if isinstance(item, dict))
            current_url = self._get_next_page(headers)

        return results

    @staticmethod
    def _get_next_page(headers: Dict[str, str]) -> Optional[str]:
        """Extract the next-page URL from a Link header."""
        link = headers.get('Link') or headers.get('link')
        if not link:
            return None
        m = _NEXT_LINK.search(link)
        return m.group(1) if m else None
