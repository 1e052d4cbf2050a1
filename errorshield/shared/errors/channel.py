"""
Outbound response channels for error emission.

A channel accepts exactly one error. Writing to a channel that has
already been committed or closed raises ResponseCommittedError, which
the translator lets propagate to the dispatcher.
"""

from typing import Protocol

from starlette.responses import PlainTextResponse, Response

from errorshield.domain.errors import ResponseCommittedError


class ResponseChannel(Protocol):
    """Sink for a single error response."""

    def send_error(self, status_code: int, message: str) -> None: ...


class BufferedResponseChannel:
    """Collects one error and renders it as a plain-text Starlette response."""

    def __init__(self) -> None:
        self.status_code: int | None = None
        self.message: str | None = None
        self._closed = False

    @property
    def committed(self) -> bool:
        return self.status_code is not None

    def send_error(self, status_code: int, message: str) -> None:
        """Commit the error status and body.

        Raises:
            ResponseCommittedError: If an error was already sent or the
                channel is closed.
        """
        if self._closed:
            raise ResponseCommittedError("Response channel is closed")
        if self.committed:
            raise ResponseCommittedError(
                f"Response already committed with status {self.status_code}"
            )
        self.status_code = status_code
        self.message = message

    def close(self) -> None:
        self._closed = True

    def to_response(self) -> Response:
        """Render the committed error.

        Raises:
            RuntimeError: If nothing was sent on this channel.
        """
        if self.status_code is None:
            raise RuntimeError("No error was sent on this channel")
        return PlainTextResponse(self.message or "", status_code=self.status_code)
