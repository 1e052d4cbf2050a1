"""
Error attributes rendered from a request's diagnostic scope.

This is the later stage that reads what the translator recorded.
It never exposes attributes to clients; the dispatcher logs them.
"""

from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from errorshield.application.classification import exception_message
from errorshield.domain.diagnostics import DiagnosticScope
from errorshield.domain.errors import HasAdditionalAttributes


def build_error_attributes(
    scope: DiagnosticScope, status_code: int, path: str | None = None
) -> dict[str, Any]:
    """Describe the error recorded on ``scope``.

    Args:
        scope: The request's diagnostic scope.
        status_code: Status that was sent to the client.
        path: Request path, if known.

    Returns:
        A dict with timestamp, status, error phrase, path and request id,
        plus exception type, message and any additional attributes when
        an exception was recorded.
    """
    try:
        error = HTTPStatus(status_code).phrase
    except ValueError:
        error = "Error"

    attributes: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status_code,
        "error": error,
        "path": path,
        "request_id": scope.request_id,
    }
    exc = scope.exception
    if exc is None:
        return attributes

    attributes["exception"] = f"{type(exc).__module__}.{type(exc).__qualname__}"
    attributes["message"] = exception_message(exc)
    if isinstance(exc, HasAdditionalAttributes):
        attributes.update(exc.additional_attributes)
    return attributes
