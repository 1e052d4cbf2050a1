"""
Per-request diagnostic scope and the recorder that writes to it.

The dispatcher creates one DiagnosticScope per request, hands it to the
translator, and finalizes it once the response is complete. The
translator only writes to it; a later rendering stage reads it back.
"""

import logging
from dataclasses import dataclass, field
from uuid import uuid4

from errorshield.domain.errors import DiagnosticScopeFinalizedError

logger = logging.getLogger(__name__)


@dataclass
class DiagnosticScope:
    """Mutable slot holding the exception handled for a single request.

    Attributes:
        request_id: Identifier of the owning request.
    """

    request_id: str = field(default_factory=lambda: uuid4().hex)
    _exception: BaseException | None = field(default=None, init=False, repr=False)
    _finalized: bool = field(default=False, init=False, repr=False)

    def record(self, exc: BaseException) -> None:
        """Store ``exc`` as the request's handled exception."""
        if self._finalized:
            raise DiagnosticScopeFinalizedError(
                f"Diagnostic scope {self.request_id} is already finalized"
            )
        self._exception = exc

    @property
    def exception(self) -> BaseException | None:
        return self._exception

    @property
    def finalized(self) -> bool:
        return self._finalized

    def finalize(self) -> None:
        """Close the scope; later writes are rejected."""
        self._finalized = True


class ExceptionRecorder:
    """Best-effort writer of handled exceptions onto a diagnostic scope."""

    def record(self, scope: DiagnosticScope, exc: BaseException) -> None:
        """Record ``exc`` on ``scope``. Failures are logged, never raised."""
        try:
            scope.record(exc)
        except Exception:
            logger.warning(
                "Could not record %s on diagnostic scope",
                type(exc).__name__,
                exc_info=True,
            )
