"""
Declared HTTP statuses for exception types.

Exception types declare their default status and reason once, at import
time, either with the ``@response_status`` class decorator or by calling
``ResponseStatusRegistry.register`` during startup. Lookup walks the
type's declared bases in MRO order, so a concrete subclass may override
the status its ancestors declare.
No framework imports allowed.
"""

from dataclasses import dataclass
from http import HTTPStatus
from typing import Callable, TypeVar

E = TypeVar("E", bound=type[BaseException])


@dataclass(frozen=True)
class DeclaredStatus:
    """A (status, reason) pair attached to an exception type.

    Attributes:
        status: The HTTP status code the exception maps to.
        reason: Reason text used when the exception's own message is blank.
    """

    status: int
    reason: str = ""

    def __post_init__(self) -> None:
        if not 100 <= self.status <= 599:
            raise ValueError(f"HTTP status out of range: {self.status}")

    @property
    def phrase(self) -> str:
        """Standard reason phrase for the status, or a generic one."""
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Error"

    @property
    def is_server_error(self) -> bool:
        return self.status >= 500


class ResponseStatusRegistry:
    """Mapping from exception type to its declared status."""

    def __init__(self) -> None:
        self._declared: dict[type[BaseException], DeclaredStatus] = {}

    def register(
        self, exc_type: type[BaseException], status: int, reason: str = ""
    ) -> None:
        """Declare the status for an exception type.

        Args:
            exc_type: The exception class being annotated.
            status: HTTP status code in [100, 599].
            reason: Fallback reason text for blank messages.
        """
        self._declared[exc_type] = DeclaredStatus(status=status, reason=reason)

    def find(self, exc_type: type[BaseException]) -> DeclaredStatus | None:
        """Return the nearest declared status in the type's hierarchy."""
        for ancestor in exc_type.__mro__:
            declared = self._declared.get(ancestor)
            if declared is not None:
                return declared
        return None

    def __contains__(self, exc_type: object) -> bool:
        return exc_type in self._declared


default_registry = ResponseStatusRegistry()


def response_status(
    status: int,
    reason: str = "",
    registry: ResponseStatusRegistry | None = None,
) -> Callable[[E], E]:
    """Class decorator declaring the HTTP status of an exception type.

    Example::

        @response_status(409, "Conflict")
        class DuplicatePipelineError(IllegalStateError):
            ...
    """

    def decorate(exc_type: E) -> E:
        (registry or default_registry).register(exc_type, status, reason)
        return exc_type

    return decorate
