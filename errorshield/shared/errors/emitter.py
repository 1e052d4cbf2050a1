"""
Response emission.

The single point where error bytes leave the translation layer.
Logs according to the classification before writing, so a failed
write never suppresses diagnostics.
"""

import logging

from errorshield.application.classification import ClassificationResult, LogLevel
from errorshield.shared.errors.channel import ResponseChannel

logger = logging.getLogger(__name__)


class ResponseEmitter:
    """Logs a classification and writes it to a response channel."""

    def emit(self, result: ClassificationResult, channel: ResponseChannel) -> None:
        """Write ``result`` to ``channel``.

        Raises:
            ResponseCommittedError: If the channel was already committed or
                closed. Not retried.
        """
        if result.log_level is not LogLevel.NONE:
            subject = result.subject
            exc_info = None
            if result.log_traceback and subject is not None:
                exc_info = (type(subject), subject, subject.__traceback__)
            logger.log(
                int(result.log_level),
                "%s [status=%d]",
                result.log_message or type(subject).__name__,
                result.status_code,
                exc_info=exc_info,
            )
        channel.send_error(result.status_code, result.message)
