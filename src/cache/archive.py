"""In-memory cache of parsed module source archives.

Each archive is parsed once and indexed by its path inside the module, with
the ``module@version/`` wrapper stripped. Entries live for the lifetime of
the process; there is no eviction.
"""
from __future__ import annotations

import io
import logging
import threading
import zipfile
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from common.errors import ArchiveReadError, CorruptArchiveError, FileNotInModuleError
from common.logging_utils import extra_context, is_debug_enabled
from common.text import decode_text

logger = logging.getLogger(__name__)


def cache_key(module: str, version: str) -> str:
    """Composite table key, ``module@version``."""
    return f"{module}@{version}"


@dataclass(frozen=True, eq=False)
class ArchiveEntry:
    """A parsed zip archive with a stripped-path lookup table."""

    archive: zipfile.ZipFile
    files: Dict[str, zipfile.ZipInfo] = field(default_factory=dict)

    def list_files(self, prefix: str = "") -> List[str]:
        """Return indexed paths starting with ``prefix`` (all when empty), unordered."""
        return [name for name in self.files if not prefix or name.startswith(prefix)]

    def read_file(self, path: str) -> str:
        """Read a file from the archive as text.

        Raises:
            FileNotInModuleError: path is not in the archive.
            ArchiveReadError: the record could not be read.
            BinaryContentError: the content is not valid UTF-8.
        """
        info = self.files.get(path)
        if info is None:
            raise FileNotInModuleError(f"file not found in archive: {path}", path=path)
        try:
            with self.archive.open(info) as fh:
                data = fh.read()
        except (zipfile.BadZipFile, OSError, RuntimeError, EOFError) as exc:
            raise ArchiveReadError(f"read file from zip: {exc}") from exc
        return decode_text(data, path)


class ArchiveCache:
    """Lock-guarded table of ``ArchiveEntry`` objects keyed by ``module@version``.

    The lock covers dictionary access only. Two callers missing on the same
    key may both download and parse; the last insert wins and both get a
    usable entry.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[str, ArchiveEntry] = {}

    def get(self, module: str, version: str) -> Optional[ArchiveEntry]:
        """Return the cached entry or None. Never fetches."""
        with self._lock:
            entry = self._entries.get(cache_key(module, version))
        if is_debug_enabled(logger):
            logger.debug(
                "Archive cache lookup",
                extra=extra_context(
                    event="cache_hit" if entry is not None else "cache_miss",
                    component="archive_cache",
                    target=cache_key(module, version),
                ),
            )
        return entry

    def put(self, module: str, version: str, data: bytes) -> ArchiveEntry:
        """Parse ``data`` as a zip archive, index it and store it.

        Raises:
            CorruptArchiveError: ``data`` is not a readable zip; nothing is stored.
        """
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, OSError, ValueError) as exc:
            raise CorruptArchiveError(f"parse zip: {exc}") from exc

        prefix = cache_key(module, version) + "/"
        files: Dict[str, zipfile.ZipInfo] = {}
        for info in archive.infolist():
            name = info.filename
            if name.startswith(prefix):
                name = name[len(prefix):]
            if not name or name.endswith("/"):
                continue
            files[name] = info

        entry = ArchiveEntry(archive=archive, files=files)
        with self._lock:
            self._entries[cache_key(module, version)] = entry
        logger.debug("Cached %s (%d files)", cache_key(module, version), len(files))
        return entry

    def get_or_load(self, module: str, version: str, loader: Callable[[], bytes]) -> ArchiveEntry:
        """Return the cached entry, or call ``loader`` for bytes and cache them.

        ``loader`` runs outside the lock; its exceptions propagate and nothing
        is cached.
        """
        entry = self.get(module, version)
        if entry is not None:
            return entry
        return self.put(module, version, loader())

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
