"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    MCP_UNAVAILABLE = 2


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROXY_URL_DEFAULT = "https://proxy.golang.org"
    LOCAL_DIR_DEFAULT = "Projects"  # relative to the user's home directory
    LATEST_ALIAS = "latest"
    MANIFEST_FILE = "go.mod"

    # Go module proxy protocol
    CASE_ESCAPE = "!"
    LATEST_VERSION_KEY = '"Version":"'

    MAX_RESPONSE_BYTES = 100 << 20  # 100 MiB
    RESPONSE_CHUNK_BYTES = 64 * 1024
    NOT_FOUND_STATUSES = (404, 410)
    USER_AGENT = "modlens/0.1.0"

    LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    # Environment overrides
    ENV_PROXY_URL = "MODLENS_PROXY_URL"
    ENV_LOCAL_DIR = "MODLENS_LOCAL_DIR"
    ENV_GOMODCACHE = "GOMODCACHE"
    ENV_GOPATH = "GOPATH"

    SERVER_NAME = "modlens"
