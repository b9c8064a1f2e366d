"""Reader for the local Go module download cache ($GOMODCACHE).

Extracted modules live at ``<root>/<encoded module>@<version>/`` with no
wrapper prefix. The directory is never written by this package.
"""
from __future__ import annotations

import logging
import os
from typing import List

from common.errors import FileNotInModuleError, MirrorError
from common.text import decode_text
from registry.goproxy.encoding import encode_path

logger = logging.getLogger(__name__)


class LocalMirror:
    """Read-only view of an extracted module cache directory.

    An empty ``root`` disables the mirror: every module reports absent.
    """

    def __init__(self, root: str = ""):
        self._root = root

    @property
    def root(self) -> str:
        return self._root

    def mod_dir(self, module: str, version: str) -> str:
        """On-disk directory for ``module@version``."""
        return os.path.join(self._root, f"{encode_path(module)}@{version}")

    def has_module(self, module: str, version: str) -> bool:
        """True iff the module version directory exists and is a directory."""
        if not self._root:
            return False
        return os.path.isdir(self.mod_dir(module, version))

    def list_files(self, module: str, version: str, prefix: str = "") -> List[str]:
        """Walk the module directory and return non-directory entries relative to its root.

        Symlinks are not followed and are listed as entries, including links
        to directories and dangling links. Paths use forward slashes to match
        archive indices. Any walk error is raised as ``MirrorError``.
        """
        root = self.mod_dir(module, version)
        if not os.path.isdir(root):
            raise MirrorError(f"walk module cache dir: {root} is not a directory")

        def _on_error(exc: OSError) -> None:
            raise MirrorError(f"walk module cache dir: {exc}") from exc

        files: List[str] = []
        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
            # os.walk reports directory symlinks under dirnames without descending
            links = [name for name in dirnames if os.path.islink(os.path.join(dirpath, name))]
            for name in filenames + links:
                rel = os.path.relpath(os.path.join(dirpath, name), root).replace(os.sep, "/")
                if not prefix or rel.startswith(prefix):
                    files.append(rel)
        return files

    def _resolve(self, module: str, version: str, path: str) -> str:
        """Join ``path`` onto the module directory, refusing anything outside it."""
        root = os.path.realpath(self.mod_dir(module, version))
        full = os.path.realpath(os.path.join(root, *path.split("/")))
        if not full.startswith(root + os.sep):
            raise FileNotInModuleError(f"file not found in module cache: {path}", path=path)
        return full

    def read_file(self, module: str, version: str, path: str) -> str:
        """Read a text file from the extracted module.

        Raises:
            FileNotInModuleError: the file does not exist or resolves outside
                the module directory.
            MirrorError: any other filesystem failure.
            BinaryContentError: the content is not valid UTF-8.
        """
        full = self._resolve(module, version, path)
        try:
            with open(full, "rb") as fh:
                data = fh.read()
        except FileNotFoundError as exc:
            raise FileNotInModuleError(f"file not found in module cache: {path}", path=path) from exc
        except OSError as exc:
            raise MirrorError(f"read file from mod cache: {exc}") from exc
        return decode_text(data, path)
