"""Go module proxy registry package.

Re-exports the client and the path encoding helpers.
"""

from .client import RegistryClient
from .encoding import encode_path, last_path_segment

__all__ = [
    "RegistryClient",
    "encode_path",
    "last_path_segment",
]
