"""
Decoration of client-visible error messages.

A single decorator instance is shared by all in-flight requests, so it is
immutable after construction.
"""

from types import MappingProxyType
from typing import Mapping


class ExceptionMessageDecorator:
    """Appends operator-configured guidance to messages for given exception types.

    Args:
        additional_messages: Exception type to extra text. The first entry
            whose type matches the exception (by isinstance) is appended
            on a new line.
    """

    def __init__(
        self, additional_messages: Mapping[type[BaseException], str] | None = None
    ) -> None:
        self._additional_messages = MappingProxyType(dict(additional_messages or {}))

    def decorate(self, exc: BaseException, message: str | None) -> str | None:
        """Return the message to send for ``exc``."""
        if message is None:
            return None
        for exc_type, extra in self._additional_messages.items():
            if isinstance(exc, exc_type) and extra:
                return f"{message}\n{extra}"
        return message
