"""
Inspection of failed calls to upstream services.

Recognises httpx errors and UpstreamCallError, finds the response they
captured (if any), and extracts the URL and JSON body for diagnostics.
Reads only the already-received response; never performs network IO.
"""

import logging
from typing import Any

import httpx

from errorshield.domain.errors import UpstreamCallError

logger = logging.getLogger(__name__)

CONTENT_TYPE_HEADER = "content-type"
JSON_MEDIA_TYPE = "application/json"

UPSTREAM_ERROR_TYPES: tuple[type[BaseException], ...] = (UpstreamCallError, httpx.HTTPError)


def is_upstream_failure(exc: BaseException) -> bool:
    """Return True when ``exc`` represents a failed call to another service."""
    return isinstance(exc, UPSTREAM_ERROR_TYPES)


def upstream_response(exc: BaseException) -> httpx.Response | None:
    """Return the response captured by an upstream failure, if one was received."""
    if isinstance(exc, UpstreamCallError):
        return exc.response
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response
    return None


def upstream_url(exc: BaseException, response: httpx.Response | None) -> str | None:
    """Return the URL of the failed call."""
    if isinstance(exc, UpstreamCallError):
        return exc.url
    if response is not None:
        try:
            return str(response.url)
        except RuntimeError:
            # Responses built without a request have no URL.
            return None
    if isinstance(exc, httpx.RequestError):
        try:
            return str(exc.request.url)
        except RuntimeError:
            return None
    return None


def upstream_status(response: httpx.Response) -> int | None:
    """Return the response's status code, or None if it does not carry one."""
    status = getattr(response, "status_code", None)
    if isinstance(status, int) and 100 <= status <= 599:
        return status
    return None


def _content_type(response: httpx.Response) -> str | None:
    headers = getattr(response, "headers", None)
    try:
        items = list(headers.items())
    except AttributeError:
        return None
    for name, value in items:
        if isinstance(name, str) and name.lower() == CONTENT_TYPE_HEADER:
            return value if isinstance(value, str) else None
    return None


def _read_body(response: httpx.Response) -> str | None:
    read = getattr(response, "read", None)
    if not callable(read):
        logger.debug("Upstream response %s has no readable body", type(response).__name__)
        return None
    try:
        raw = read()
    # httpx.StreamError is a RuntimeError; transport failures mid-body are HTTPErrors.
    except (httpx.HTTPError, RuntimeError, OSError):
        logger.debug("Upstream response body could not be read", exc_info=True)
        return None
    if isinstance(raw, str):
        return raw
    if not isinstance(raw, (bytes, bytearray)):
        return None
    return raw.decode("utf-8", errors="replace")


def extract_context(exc: BaseException) -> dict[str, Any]:
    """Build the additional context for an upstream failure.

    Args:
        exc: An upstream failure that carries a received response.

    Returns:
        A mapping that always contains ``url`` and contains ``body`` only
        when the response is JSON and its body could be read.
    """
    response = upstream_response(exc)
    context: dict[str, Any] = {"url": upstream_url(exc, response)}
    if response is None:
        return context

    content_type = _content_type(response)
    if content_type is not None and JSON_MEDIA_TYPE in content_type.lower():
        body = _read_body(response)
        if body is not None:
            context["body"] = body
    return context
