"""Go module proxy client: version lists, latest metadata, go.mod and zips."""
from __future__ import annotations

import logging
import threading
from typing import List, Optional

import requests

from constants import Constants
from common.errors import VersionResolutionError
from common.http_client import bounded_get
from common.logging_utils import extra_context

from .encoding import encode_path

logger = logging.getLogger(__name__)


class RegistryClient:
    """Client for the four read endpoints of a Go module proxy.

    Every method issues a single bounded GET; failures are raised once and
    never retried. ``timeout`` and ``cancel_event`` are forwarded to the
    request so the caller owns deadlines and cancellation.
    """

    def __init__(
        self,
        base_url: str = Constants.PROXY_URL_DEFAULT,
        session: Optional[requests.Session] = None,
        max_bytes: int = Constants.MAX_RESPONSE_BYTES,
    ):
        """Initialize the client.

        Args:
            base_url: Proxy base URL, e.g. https://proxy.golang.org.
            session: Optional requests session (tests pass a fake).
            max_bytes: Response body ceiling.
        """
        self._base_url = base_url.rstrip("/")
        self._max_bytes = max_bytes
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = Constants.USER_AGENT
        self._session = session

    @property
    def base_url(self) -> str:
        return self._base_url

    def module_url(self, module: str, suffix: str) -> str:
        """Build ``<base>/<encoded module><suffix>``."""
        return f"{self._base_url}/{encode_path(module)}{suffix}"

    def _get(
        self,
        url: str,
        context: str,
        timeout: Optional[float],
        cancel_event: Optional[threading.Event],
    ) -> bytes:
        return bounded_get(
            self._session,
            url,
            context=context,
            max_bytes=self._max_bytes,
            timeout=timeout,
            cancel_event=cancel_event,
        )

    def list_versions(
        self,
        module: str,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[str]:
        """Return known versions in proxy order, blank lines dropped."""
        body = self._get(self.module_url(module, "/@v/list"), "list versions", timeout, cancel_event)
        text = body.decode("utf-8", errors="replace")
        return [line.strip() for line in text.strip().split("\n") if line.strip()]

    def latest(
        self,
        module: str,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """Return the raw ``@latest`` metadata document."""
        body = self._get(self.module_url(module, "/@latest"), "latest info", timeout, cancel_event)
        return body.decode("utf-8", errors="replace")

    def resolve_latest(
        self,
        module: str,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """Resolve ``latest`` to a concrete version.

        The metadata looks like ``{"Version":"v0.1.0","Time":"..."}``; only the
        ``Version`` value is needed so it is scanned for directly.
        """
        info = self.latest(module, timeout=timeout, cancel_event=cancel_event)
        marker = Constants.LATEST_VERSION_KEY
        start = info.find(marker)
        if start < 0:
            raise VersionResolutionError(f"cannot parse latest response: {info}")
        rest = info[start + len(marker):]
        end = rest.find('"')
        if end < 0:
            raise VersionResolutionError("cannot parse latest response version")
        version = rest[:end]
        logger.debug(
            "Resolved latest version",
            extra=extra_context(event="resolve_latest", component="goproxy", target=module, version=version),
        )
        return version

    def read_mod(
        self,
        module: str,
        version: str,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """Return the go.mod file for ``module@version``."""
        url = self.module_url(module, f"/@v/{version}.mod")
        return self._get(url, "read mod", timeout, cancel_event).decode("utf-8", errors="replace")

    def download_zip(
        self,
        module: str,
        version: str,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> bytes:
        """Download the source archive for ``module@version``."""
        url = self.module_url(module, f"/@v/{version}.zip")
        logger.info("Downloading %s@%s", module, version)
        return self._get(url, "download zip", timeout, cancel_event)
