"""In-memory caches for downloaded module archives."""

from .archive import ArchiveCache, ArchiveEntry, cache_key

__all__ = [
    "ArchiveCache",
    "ArchiveEntry",
    "cache_key",
]
