"""Workspace fallback for modules the proxy does not know about."""
from __future__ import annotations

import logging
import os
from typing import Optional

from registry.goproxy.encoding import last_path_segment

logger = logging.getLogger(__name__)

SUGGESTION_TEMPLATE = (
    'Module "{module}" is not available on the Go module proxy, '
    "but a local directory exists at {path} that may contain its source. "
    "You can use your file tools to browse it."
)


class FallbackSuggester:
    """Points at ``<workspace_root>/<last path segment>`` when it is a directory."""

    def __init__(self, workspace_root: str = ""):
        self._root = workspace_root

    @property
    def root(self) -> str:
        return self._root

    def suggest(self, module: str) -> Optional[str]:
        """Return a suggestion message, or None when no local directory matches."""
        if not self._root:
            return None
        candidate = os.path.abspath(os.path.join(self._root, last_path_segment(module)))
        if not os.path.isdir(candidate):
            return None
        logger.info("Suggesting local directory %s for %s", candidate, module)
        return SUGGESTION_TEMPLATE.format(module=module, path=candidate)
