"""Module resolution service and its result models."""

from .models import FileContent, FileListing, Source, VersionListing
from .service import Resolver

__all__ = [
    "FileContent",
    "FileListing",
    "Resolver",
    "Source",
    "VersionListing",
]
