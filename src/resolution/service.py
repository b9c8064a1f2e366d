"""Resolution pipeline: alias resolution, then mirror, then archive cache/proxy.

Per call the resolver moves through ``resolve-version -> try-local-mirror ->
try-cache-or-network`` and either returns a result or raises. Only
``list_versions`` turns a proxy not-found into a workspace suggestion;
the other operations let ``RegistryNotFoundError`` propagate.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from constants import Constants
from cache.archive import ArchiveCache, ArchiveEntry
from common.errors import (
    CorruptArchiveError,
    ModlensError,
    RegistryNotFoundError,
    VersionResolutionError,
)
from common.logging_utils import extra_context, is_debug_enabled, Timer
from local.modcache import LocalMirror
from local.workspace import FallbackSuggester
from registry.goproxy.client import RegistryClient

from .models import FileContent, FileListing, Source, VersionListing

logger = logging.getLogger(__name__)


class Resolver:
    """Serves the four module operations from the cheapest available tier."""

    def __init__(
        self,
        client: RegistryClient,
        archive_cache: ArchiveCache,
        mirror: LocalMirror,
        suggester: FallbackSuggester,
    ):
        """Initialize the resolver with explicitly owned collaborators.

        Args:
            client: Module proxy client.
            archive_cache: Shared in-memory archive table.
            mirror: Local module cache reader.
            suggester: Workspace fallback for unknown modules.
        """
        self._client = client
        self._archive_cache = archive_cache
        self._mirror = mirror
        self._suggester = suggester

    def resolve_version(
        self,
        module: str,
        version: str,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """Map the ``latest`` alias (any case) to a concrete version.

        Raises:
            VersionResolutionError: the metadata fetch failed or was unparseable.
        """
        if version.lower() != Constants.LATEST_ALIAS:
            return version
        try:
            return self._client.resolve_latest(module, timeout=timeout, cancel_event=cancel_event)
        except ModlensError as exc:
            raise VersionResolutionError(f"resolve latest version: {exc}") from exc

    def list_versions(
        self,
        module: str,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> VersionListing:
        """List versions; on proxy not-found offer a workspace suggestion instead.

        Raises:
            RegistryNotFoundError: unknown module and no local directory matches.
        """
        try:
            versions = self._client.list_versions(module, timeout=timeout, cancel_event=cancel_event)
        except RegistryNotFoundError:
            suggestion = self._suggester.suggest(module)
            if suggestion is None:
                raise
            return VersionListing(module=module, suggestion=suggestion)

        latest_info: Optional[str] = None
        try:
            latest_info = self._client.latest(module, timeout=timeout, cancel_event=cancel_event)
        except ModlensError as exc:
            logger.debug("Latest info unavailable for %s: %s", module, exc)
        return VersionListing(module=module, versions=versions, latest_info=latest_info)

    def read_manifest(
        self,
        module: str,
        version: str,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> FileContent:
        """Return go.mod, preferring the local mirror and falling back to the proxy."""
        version = self.resolve_version(module, version, timeout=timeout, cancel_event=cancel_event)
        if self._mirror.has_module(module, version):
            try:
                content = self._mirror.read_file(module, version, Constants.MANIFEST_FILE)
                return FileContent(module, version, Constants.MANIFEST_FILE, content, Source.MIRROR)
            except ModlensError as exc:
                logger.warning("Mirror go.mod unreadable for %s@%s, using proxy: %s", module, version, exc)

        content = self._client.read_mod(module, version, timeout=timeout, cancel_event=cancel_event)
        return FileContent(module, version, Constants.MANIFEST_FILE, content, Source.REGISTRY)

    def list_files(
        self,
        module: str,
        version: str,
        prefix: str = "",
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> FileListing:
        """List files of a module version, sorted, optionally filtered by prefix."""
        version = self.resolve_version(module, version, timeout=timeout, cancel_event=cancel_event)
        if self._mirror.has_module(module, version):
            files = self._mirror.list_files(module, version, prefix)
            source = Source.MIRROR
        else:
            entry = self._archive(module, version, timeout=timeout, cancel_event=cancel_event)
            files = entry.list_files(prefix)
            source = Source.REGISTRY
        return FileListing(module, version, prefix, sorted(files), source)

    def read_file(
        self,
        module: str,
        version: str,
        path: str,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> FileContent:
        """Read one text file of a module version."""
        version = self.resolve_version(module, version, timeout=timeout, cancel_event=cancel_event)
        if self._mirror.has_module(module, version):
            content = self._mirror.read_file(module, version, path)
            return FileContent(module, version, path, content, Source.MIRROR)

        entry = self._archive(module, version, timeout=timeout, cancel_event=cancel_event)
        return FileContent(module, version, path, entry.read_file(path), Source.REGISTRY)

    def _archive(
        self,
        module: str,
        version: str,
        *,
        timeout: Optional[float],
        cancel_event: Optional[threading.Event],
    ) -> ArchiveEntry:
        """Return the cached archive, downloading and caching it on a miss."""

        def _download() -> bytes:
            with Timer() as t:
                try:
                    data = self._client.download_zip(module, version, timeout=timeout, cancel_event=cancel_event)
                except ModlensError as exc:
                    raise exc.wrap("download zip") from exc
            if is_debug_enabled(logger):
                logger.debug(
                    "Archive downloaded",
                    extra=extra_context(
                        event="archive_download",
                        component="resolver",
                        target=f"{module}@{version}",
                        bytes=len(data),
                        duration_ms=t.duration_ms(),
                    ),
                )
            return data

        try:
            return self._archive_cache.get_or_load(module, version, _download)
        except CorruptArchiveError as exc:
            raise exc.wrap("cache zip") from exc
