"""Shared HTTP helper used by the module proxy client.

Encapsulates the bounded GET contract so the registry client does not
duplicate status, size-limit and cancellation handling: 404/410 become
``RegistryNotFoundError``, any other non-200 status, transport failure or
oversize body becomes ``RegistryError``. Nothing is retried.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import requests

from constants import Constants
from common.errors import (
    RegistryError,
    RegistryNotFoundError,
    RequestCancelledError,
    ResponseTooLargeError,
)
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def _check_cancelled(cancel_event: Optional[threading.Event], url: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise RequestCancelledError(f"request cancelled: {safe_url(url)}", url=url)


def bounded_get(
    session: requests.Session,
    url: str,
    *,
    context: str,
    max_bytes: int = Constants.MAX_RESPONSE_BYTES,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
    **kwargs: Any,
) -> bytes:
    """Perform a GET and return the full body, never more than ``max_bytes``.

    Args:
        session: Session used to issue the request.
        url: Target URL.
        context: Human-readable tag for logs (e.g. "list versions").
        max_bytes: Body ceiling; reading stops after max_bytes + 1 bytes.
        timeout: Optional requests timeout in seconds.
        cancel_event: Checked before the request and between body chunks.
        **kwargs: Passed through to ``session.get``.

    Returns:
        bytes: The response body.

    Raises:
        RegistryNotFoundError: status 404 or 410.
        RequestCancelledError: ``cancel_event`` was set.
        ResponseTooLargeError: body larger than ``max_bytes``.
        RegistryError: any other status or transport failure.
    """
    safe_target = safe_url(url)
    _check_cancelled(cancel_event, url)

    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            res = session.get(url, timeout=timeout, stream=True, **kwargs)
        except requests.Timeout as exc:
            logger.warning("%s request timed out: %s", context, safe_target)
            raise RegistryError(f"fetch {safe_target}: timed out", url=url) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.warning("%s connection error: %s", context, exc)
            raise RegistryError(f"fetch {safe_target}: {exc}", url=url) from exc

        try:
            if res.status_code in Constants.NOT_FOUND_STATUSES:
                logger.info(
                    "Module not found on proxy",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        outcome="not_found",
                        status_code=res.status_code,
                        target=safe_target,
                        context=context,
                    ),
                )
                raise RegistryNotFoundError("module not found", url=url, status_code=res.status_code)

            if res.status_code != 200:
                logger.warning(
                    "HTTP non-2xx",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        outcome="unexpected_status",
                        status_code=res.status_code,
                        target=safe_target,
                        context=context,
                    ),
                )
                raise RegistryError(
                    f"unexpected status {res.status_code} for {safe_target}",
                    url=url,
                    status_code=res.status_code,
                )

            body = _read_limited(res, url, max_bytes, cancel_event)
        finally:
            res.close()

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    bytes=len(body),
                    target=safe_target,
                    context=context,
                ),
            )
        return body


def _read_limited(
    res: requests.Response,
    url: str,
    max_bytes: int,
    cancel_event: Optional[threading.Event],
) -> bytes:
    """Read at most max_bytes + 1 bytes from a streamed response."""
    buf = bytearray()
    limit = max_bytes + 1
    try:
        for chunk in res.iter_content(chunk_size=Constants.RESPONSE_CHUNK_BYTES):
            _check_cancelled(cancel_event, url)
            if not chunk:
                continue
            buf.extend(chunk[: limit - len(buf)])
            if len(buf) >= limit:
                break
    except requests.RequestException as exc:
        raise RegistryError(f"read response: {exc}", url=url) from exc

    if len(buf) > max_bytes:
        raise ResponseTooLargeError(f"response too large (>{max_bytes} bytes)", url=url)
    return bytes(buf)
