"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    IMPORT_ERROR = 3


class DepType(Enum):
    """Dependency types reported in feedback messages.

    Args:
        Enum (string): Dependency type labels.
    """

    IMPORTED = "imported"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "DEPIMPORT_LOG_LEVEL"
    CONFIG_SECTION = "depimport"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    # Version listing
    GIT_BINARY = "git"
    GIT_TIMEOUT_SEC = 60
    VERSION_CACHE_TTL_SEC = 600
    DEFAULT_CONSTRAINT_FROM_LOCK = True

    # Repository API constants
    GITHUB_API_BASE = "https://api.github.com"
    GITHUB_API_ENABLED = False
    ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
    REPO_API_PER_PAGE = 100
    HTTP_RETRY_MAX = 3
