"""
Logging setup for the error-translation service.

The translation layer writes its own log lines: the emitter logs each
classified exception at the level the classifier asked for, the
recorder logs when a diagnostic scope can no longer accept an
exception, and the dispatcher logs rendered error attributes at DEBUG.
Those loggers live under the ``errorshield`` namespace and can be tuned
separately from the root level.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

TRANSLATION_LOGGER = "errorshield"
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _level(name: str | None, default: int) -> int:
    value = getattr(logging, name.upper(), None) if name else None
    return value if isinstance(value, int) else default


def configure_logging(level: str = "INFO", translation_level: str | None = None) -> None:
    """Configure root logging and the translation layer's loggers.

    Args:
        level: Root log level name.
        translation_level: Level for the ``errorshield`` loggers. Defaults
            to ``level``.
    """
    root_level = _level(level, logging.INFO)
    logging.basicConfig(
        level=root_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    logging.getLogger(TRANSLATION_LOGGER).setLevel(_level(translation_level, root_level))

    # Upstream client chatter duplicates what the translator already reports.
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
