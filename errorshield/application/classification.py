"""
Exception classification.

Decides, for any exception value, which HTTP status and client-visible
message it produces and how loudly the server should log it.

Categories are matched in a fixed order; the first match wins:

    1. access denied      -> 403, static message (never the original)
    2. not found          -> 404, original message
    3. invalid request    -> 400, original message
    4. illegal state      -> declared-status lookup
    5. upstream failure   -> upstream status + extracted context,
                             or declared-status lookup at warn level
                             when no response was received
    6. anything else      -> declared-status lookup
    7. nothing declared   -> 500, original message, error level

Classification performs no logging itself; the emitter logs according
to the returned result.
"""

import enum
import logging
from dataclasses import dataclass, field, replace
from http import HTTPStatus
from typing import Any, Mapping

from errorshield.domain.errors import (
    AccessDeniedError,
    ErrorShieldError,
    IllegalStateError,
    InvalidRequestError,
    NotFoundError,
    UpstreamErrorWrapper,
    UserError,
)
from errorshield.domain.message_decorator import ExceptionMessageDecorator
from errorshield.domain.response_status import (
    DeclaredStatus,
    ResponseStatusRegistry,
    default_registry,
)
from errorshield.infrastructure.upstream import (
    extract_context,
    is_upstream_failure,
    upstream_response,
    upstream_status,
)

ACCESS_DENIED_MESSAGE = "Access is denied"
INTERNAL_SERVER_ERROR_MESSAGE = HTTPStatus.INTERNAL_SERVER_ERROR.phrase


class ExceptionCategory(str, enum.Enum):
    """Closed set of handling policies, in precedence order."""

    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    INVALID_REQUEST = "invalid_request"
    ILLEGAL_STATE = "illegal_state"
    UPSTREAM_FAILURE = "upstream_failure"
    GENERIC = "generic"


class LogLevel(enum.IntEnum):
    """Server-side log level requested by a classification."""

    NONE = 0
    WARNING = logging.WARNING
    ERROR = logging.ERROR


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one exception.

    Attributes:
        category: The policy that matched.
        status_code: HTTP status in [100, 599].
        message: Final, decorated client-visible message. Never None.
        log_level: How the emitter should log the exception.
        log_message: Text of the server-side log line.
        log_traceback: Whether the log line carries the traceback.
        additional_context: Diagnostic fields extracted for upstream failures.
        subject: The exception to record; a fresh wrapper for upstream
            failures with a response, otherwise the original exception.
    """

    category: ExceptionCategory
    status_code: int
    message: str
    log_level: LogLevel = LogLevel.NONE
    log_message: str = ""
    log_traceback: bool = False
    additional_context: Mapping[str, Any] = field(default_factory=dict)
    subject: BaseException | None = field(default=None, compare=False, repr=False)


def categorize(exc: BaseException) -> ExceptionCategory:
    """Return the first category in precedence order that ``exc`` belongs to."""
    if isinstance(exc, AccessDeniedError):
        return ExceptionCategory.ACCESS_DENIED
    if isinstance(exc, NotFoundError):
        return ExceptionCategory.NOT_FOUND
    if isinstance(exc, (InvalidRequestError, UserError, ValueError)):
        return ExceptionCategory.INVALID_REQUEST
    if isinstance(exc, IllegalStateError):
        return ExceptionCategory.ILLEGAL_STATE
    if is_upstream_failure(exc):
        return ExceptionCategory.UPSTREAM_FAILURE
    return ExceptionCategory.GENERIC


def exception_message(exc: BaseException) -> str | None:
    """Return the human-readable message of ``exc``, or None if it has none."""
    if isinstance(exc, ErrorShieldError):
        return exc.message
    try:
        text = str(exc)
    except Exception:
        return None
    return text or None


def _is_blank(message: str | None) -> bool:
    return message is None or not message.strip()


def _phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Error"


class ExceptionClassifier:
    """Maps exceptions to ClassificationResults.

    Args:
        decorator: Shared message decorator applied to every message.
        registry: Declared statuses consulted for illegal-state and
            unclassified exceptions.
        access_denied_message: Static message sent for access-denied errors.
        fallback_message: Message sent at 500 when the exception has none.
    """

    def __init__(
        self,
        decorator: ExceptionMessageDecorator | None = None,
        registry: ResponseStatusRegistry | None = None,
        access_denied_message: str = ACCESS_DENIED_MESSAGE,
        fallback_message: str = INTERNAL_SERVER_ERROR_MESSAGE,
    ) -> None:
        self._decorator = decorator or ExceptionMessageDecorator()
        self._registry = registry if registry is not None else default_registry
        self._access_denied_message = access_denied_message
        self._fallback_message = fallback_message

    def classify(self, exc: BaseException) -> ClassificationResult:
        """Classify ``exc`` into a status, message and log level."""
        category = categorize(exc)

        if category is ExceptionCategory.ACCESS_DENIED:
            return self._result(
                category, exc, HTTPStatus.FORBIDDEN, self._access_denied_message
            )
        if category is ExceptionCategory.NOT_FOUND:
            return self._result(
                category, exc, HTTPStatus.NOT_FOUND, exception_message(exc)
            )
        if category is ExceptionCategory.INVALID_REQUEST:
            return self._result(
                category, exc, HTTPStatus.BAD_REQUEST, exception_message(exc)
            )
        if category is ExceptionCategory.UPSTREAM_FAILURE:
            return self._classify_upstream(exc)
        return self._classify_declared(category, exc)

    def _classify_upstream(self, exc: BaseException) -> ClassificationResult:
        category = ExceptionCategory.UPSTREAM_FAILURE
        response = upstream_response(exc)
        if response is None:
            # Network-level failure: nothing to extract.
            result = self._classify_declared(category, exc)
            return replace(
                result,
                log_level=LogLevel.WARNING,
                log_message="Upstream call failed without a response",
                log_traceback=True,
            )

        context = extract_context(exc)
        wrapper = UpstreamErrorWrapper(exception_message(exc), context)
        status = upstream_status(response)
        if status is None:
            status = HTTPStatus.BAD_GATEWAY
        return self._result(
            category,
            wrapper,
            status,
            wrapper.message,
            additional_context=context,
        )

    def _classify_declared(
        self, category: ExceptionCategory, exc: BaseException
    ) -> ClassificationResult:
        declared = self._registry.find(type(exc))
        message = exception_message(exc)
        if declared is None:
            if _is_blank(message):
                message = self._fallback_message
            return self._result(
                category,
                exc,
                HTTPStatus.INTERNAL_SERVER_ERROR,
                message,
                log_level=LogLevel.ERROR,
                log_message=INTERNAL_SERVER_ERROR_MESSAGE,
                log_traceback=True,
            )

        if _is_blank(message):
            message = declared.reason or declared.phrase
        log_level, log_message, log_traceback = self._declared_log(declared, exc)
        return self._result(
            category,
            exc,
            declared.status,
            message,
            log_level=log_level,
            log_message=log_message,
            log_traceback=log_traceback,
        )

    @staticmethod
    def _declared_log(
        declared: DeclaredStatus, exc: BaseException
    ) -> tuple[LogLevel, str, bool]:
        if declared.is_server_error:
            return LogLevel.ERROR, declared.phrase, True
        if 400 <= declared.status < 500 and declared.status != HTTPStatus.NOT_FOUND:
            detail = exception_message(exc) or ""
            log_message = f"{declared.phrase}: {type(exc).__name__}: {detail}"
            return LogLevel.WARNING, log_message, False
        return LogLevel.NONE, "", False

    def _result(
        self,
        category: ExceptionCategory,
        subject: BaseException,
        status: int,
        message: str | None,
        **extra: Any,
    ) -> ClassificationResult:
        decorated = self._decorator.decorate(subject, message)
        if decorated is None:
            decorated = (
                self._fallback_message
                if status == HTTPStatus.INTERNAL_SERVER_ERROR
                else _phrase(status)
            )
        return ClassificationResult(
            category=category,
            status_code=int(status),
            message=decorated,
            subject=subject,
            **extra,
        )
