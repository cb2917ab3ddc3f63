"""Logging setup for export runs.

Export runs log on a small verbosity scale:

* ``-q`` shows warnings and errors only,
* no flag shows the start and end of each export,
* ``-v`` adds one :data:`PROGRESS` line per traversal batch,
* ``-vv`` adds DEBUG records, including why a declaration was skipped.

Console records carry the component that emitted them (``extractor``,
``traversal`` ...) so skip reasons can be traced back to their source.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "declexport"

# Between DEBUG and INFO: per-batch traversal progress.
PROGRESS = logging.INFO - 5
logging.addLevelName(PROGRESS, "PROGRESS")


class ComponentFormatter(logging.Formatter):
    """Formats records as ``[declexport:<component>] LEVEL message``."""

    def __init__(self) -> None:
        super().__init__("[%(component)s] %(levelname)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        _, _, component = record.name.partition(".")
        record.component = f"{_LOGGER_NAME}:{component}" if component else _LOGGER_NAME
        return super().format(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a component logger under the declexport hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def level_for(verbosity: int = 0, *, quiet: bool = False) -> int:
    """Map ``-v`` counts and ``-q`` onto a logging level."""
    if quiet:
        return logging.WARNING
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return PROGRESS
    return logging.INFO


def configure_logging(
    *, verbosity: int = 0, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install console (and optional file) handlers on the declexport logger.

    The file handler always records everything down to DEBUG, whatever the
    console level, so a ``--log-file`` keeps the full skip history of a run.
    Calling this again replaces the handlers installed by the previous call.
    """
    level = level_for(verbosity, quiet=quiet)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(ComponentFormatter())
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(level)

    return logger


__all__ = ["PROGRESS", "ComponentFormatter", "configure_logging", "get_logger", "level_for"]
