"""Result models returned by the resolver."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Source(Enum):
    """Tier that served a result."""
    MIRROR = "mirror"
    REGISTRY = "registry"


@dataclass
class VersionListing:
    """Versions known to the proxy, or a local suggestion when it has none."""
    module: str
    versions: List[str] = field(default_factory=list)
    latest_info: Optional[str] = None
    suggestion: Optional[str] = None


@dataclass
class FileListing:
    """Sorted file paths of one module version."""
    module: str
    version: str
    prefix: str
    files: List[str]
    source: Source


@dataclass
class FileContent:
    """Text content of one file (go.mod included)."""
    module: str
    version: str
    path: str
    content: str
    source: Source
