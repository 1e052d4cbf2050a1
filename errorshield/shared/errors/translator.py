"""
Core entry point of the error-translation layer.

The dispatcher calls ``ExceptionTranslator.handle`` with a caught
exception, the request's diagnostic scope and a response channel.
Every exception is classified into some policy; the only failure that
escapes is a write to an already-committed channel.
"""

from errorshield.application.classification import (
    ClassificationResult,
    ExceptionClassifier,
)
from errorshield.domain.diagnostics import DiagnosticScope, ExceptionRecorder
from errorshield.shared.errors.channel import ResponseChannel
from errorshield.shared.errors.emitter import ResponseEmitter


class ExceptionTranslator:
    """Classifies, records and emits one handled exception per request.

    Args:
        classifier: Decision table for status and message.
        recorder: Writer of the handled exception onto the diagnostic scope.
        emitter: Writer of the final response.
    """

    def __init__(
        self,
        classifier: ExceptionClassifier | None = None,
        recorder: ExceptionRecorder | None = None,
        emitter: ResponseEmitter | None = None,
    ) -> None:
        self.classifier = classifier or ExceptionClassifier()
        self.recorder = recorder or ExceptionRecorder()
        self.emitter = emitter or ResponseEmitter()

    def handle(
        self,
        exc: BaseException,
        scope: DiagnosticScope,
        channel: ResponseChannel,
    ) -> ClassificationResult:
        """Translate ``exc`` into an error response on ``channel``.

        The exception is always recorded on ``scope`` before anything is
        written to ``channel``.

        Returns:
            The classification that was emitted.

        Raises:
            ResponseCommittedError: If ``channel`` was already committed.
        """
        result = self.classifier.classify(exc)
        self.recorder.record(scope, result.subject if result.subject is not None else exc)
        self.emitter.emit(result, channel)
        return result
