"""Local filesystem tiers: the module download cache and the workspace fallback."""

from .modcache import LocalMirror
from .workspace import FallbackSuggester

__all__ = [
    "LocalMirror",
    "FallbackSuggester",
]
