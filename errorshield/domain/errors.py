"""
Error taxonomy recognised by the translation layer.

Routes and services raise these to select a response policy.
The classifier matches on these types; any other exception falls
through to the declared-status lookup.
No framework imports allowed.
"""

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class HasAdditionalAttributes(Protocol):
    """An exception that carries extra diagnostic fields for error rendering."""

    @property
    def additional_attributes(self) -> Mapping[str, Any]: ...


class ErrorShieldError(Exception):
    """Base error for all exceptions defined by this package."""

    def __init__(self, message: str | None = None) -> None:
        self.message = message
        if message is None:
            super().__init__()
        else:
            super().__init__(message)


class AccessDeniedError(ErrorShieldError):
    """Raised when the caller lacks permission for the requested operation.

    The message is kept for server-side diagnostics only; it is never
    sent to the client.
    """


class NotFoundError(ErrorShieldError):
    """Raised when a requested resource does not exist."""


class InvalidRequestError(ErrorShieldError):
    """Raised when the request itself is malformed or semantically invalid."""


class UserError(ErrorShieldError):
    """Raised when user-supplied input cannot be acted upon."""


class IllegalStateError(ErrorShieldError, RuntimeError):
    """Raised when an operation is attempted in a state that forbids it.

    Subclasses usually declare their own status with ``@response_status``.
    """


class UpstreamCallError(ErrorShieldError):
    """Raised when a call to another service fails.

    Attributes:
        url: The URL that was called.
        response: The captured httpx.Response, or None on a network-level
            failure. Other response objects are inspected on a best-effort
            basis; fields they do not expose are left out of the context.
    """

    def __init__(self, message: str | None, url: str, response: Any = None) -> None:
        super().__init__(message)
        self.url = url
        self.response = response


class UpstreamErrorWrapper(ErrorShieldError):
    """Carries an upstream failure's message alongside extracted context.

    Built fresh by the classifier so the original exception is never mutated.
    """

    def __init__(
        self, message: str | None, additional_attributes: Mapping[str, Any] | None
    ) -> None:
        super().__init__(message)
        self._additional_attributes = dict(additional_attributes or {})

    @property
    def additional_attributes(self) -> Mapping[str, Any]:
        return self._additional_attributes


class ResponseCommittedError(OSError):
    """Raised when an error is written to a response that was already sent."""


class DiagnosticScopeFinalizedError(RuntimeError):
    """Raised when an exception is recorded on a scope that was torn down."""
