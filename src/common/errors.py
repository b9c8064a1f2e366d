"""Error taxonomy shared by the registry client, caches and resolver.

Callers branch on exception classes, never on message text. Wrapping a
failure with stage context keeps its class so a ``RegistryNotFoundError``
raised deep inside a download is still a ``RegistryNotFoundError`` when it
reaches the tool layer.
"""
from __future__ import annotations

import copy
from typing import Optional


class ModlensError(Exception):
    """Base class for every failure surfaced by the resolution pipeline."""

    def wrap(self, stage: str) -> "ModlensError":
        """Return a copy of this error whose message is prefixed with ``stage``.

        Extra attributes (status code, URL, path) are carried over so the
        wrapped error stays inspectable. Use with ``raise err.wrap(...) from err``.
        """
        wrapped = copy.copy(self)
        wrapped.args = (f"{stage}: {self}",)
        return wrapped


class RegistryError(ModlensError):
    """Transport or server failure talking to the module proxy."""

    def __init__(self, message: str, *, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class RegistryNotFoundError(RegistryError):
    """The proxy has no record of the module or version (HTTP 404/410)."""


class RequestCancelledError(RegistryError):
    """The caller cancelled the request before the body was fully read."""


class ResponseTooLargeError(RegistryError):
    """The response body exceeded the configured ceiling."""


class VersionResolutionError(ModlensError):
    """The ``latest`` alias could not be mapped to a concrete version."""


class CorruptArchiveError(ModlensError):
    """Downloaded bytes are not a readable zip archive."""


class ArchiveReadError(ModlensError):
    """A record inside a parsed archive could not be read."""


class FileNotInModuleError(ModlensError):
    """The module exists but the requested file does not."""

    def __init__(self, message: str, *, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class BinaryContentError(ModlensError):
    """The file exists but is not valid UTF-8 text."""

    def __init__(self, message: str, *, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class MirrorError(ModlensError):
    """Filesystem failure while reading the local module cache."""
