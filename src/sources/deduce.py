"""Project root deduction for import paths.

Maps any import path (a project root or a package below it) to the root of
the repository that hosts it, using the path conventions of the well-known
code hosts plus explicit VCS suffixes for everything else.
"""
from __future__ import annotations

import re
from typing import List, Pattern

from .base import ProjectRootError

_SEGMENT = r'[A-Za-z0-9_.\-]+'

# The "root" group of each pattern is the project root; first match wins.
_PATTERNS: List[Pattern[str]] = [
    re.compile(rf'^(?P<root>github\.com/{_SEGMENT}/{_SEGMENT})(/{_SEGMENT})*$'),
    re.compile(rf'^(?P<root>gitlab\.com/{_SEGMENT}/{_SEGMENT})(/{_SEGMENT})*$'),
    re.compile(rf'^(?P<root>bitbucket\.org/{_SEGMENT}/{_SEGMENT})(/{_SEGMENT})*$'),
    re.compile(
        r'^(?P<root>gopkg\.in(?:/[A-Za-z0-9][-A-Za-z0-9]+)?/[A-Za-z][-.A-Za-z0-9]*\.v\d+(?:-unstable)?)'
        r'(?:\.git)?(/[A-Za-z0-9][-.A-Za-z0-9]*)*$'
    ),
    re.compile(r'^(?P<root>golang\.org/x/[A-Za-z0-9_\-]+)(/.*)?$'),
    re.compile(r'^(?P<root>go\.googlesource\.com/[A-Za-z0-9_\-]+)(/.*)?$'),
    # Anything else needs an explicit VCS suffix.
    re.compile(r'^(?P<root>[A-Za-z0-9.\-]+(?::\d+)?/[A-Za-z0-9_.\-/~]*?\.(?:git|hg|bzr|svn))(/.*)?$'),
]

_SCP_LIKE = re.compile(r'^[A-Za-z0-9_.\-]+@(?P<host>[A-Za-z0-9.\-]+):(?P<path>.+)$')
_SCHEME = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*://')
_FORGE_HOSTS = ("github.com/", "gitlab.com/", "bitbucket.org/")


def normalize_import_path(path: str) -> str:
    """Strip schemes, scp-style user prefixes, trailing slashes and forge ``.git`` suffixes."""
    p = (path or "").strip()
    m = _SCP_LIKE.match(p)
    if m:
        p = f"{m.group('host')}/{m.group('path')}"
    p = _SCHEME.sub("", p)
    p = p.rsplit("@", 1)[-1] if "@" in p.split("/", 1)[0] else p
    p = p.rstrip("/")
    if p.startswith(_FORGE_HOSTS) and p.endswith(".git"):
        p = p[:-4]
    return p


def deduce_project_root(import_path: str) -> str:
    """Return the project root for an import path.

    Raises:
        ProjectRootError: if the path matches no known hosting convention.
    """
    path = normalize_import_path(import_path)
    if not path:
        raise ProjectRootError("empty import path")
    for pattern in _PATTERNS:
        m = pattern.match(path)
        if m:
            return m.group("root")
    raise ProjectRootError(f"unable to deduce repository and source type for {import_path!r}")


def default_source_url(root: str) -> str:
    """Return the URL a project root is fetched from when no alternate source is given."""
    if root.startswith("golang.org/x/"):
        return "https://go.googlesource.com/" + root[len("golang.org/x/"):]
    return f"https://{root}"
