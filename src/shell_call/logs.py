"""Logging setup for harness processes.

Records go to stderr so that stdout carries nothing but the result write.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from shell_call.config import HarnessSettings

_DEVELOPMENT_FORMAT = "%(levelname)-5s %(message)s"
_DEFAULT_FORMAT = "%(levelname)-5s %(asctime)s %(message)s"
_DATE_FORMAT = "%m/%d %H:%M:%S"


def configure_logging(settings: HarnessSettings, stream: TextIO | None = None) -> logging.Logger:
    """Attach a single stderr handler to the package logger."""

    logger = logging.getLogger("shell_call")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    if settings.is_development:
        handler.setFormatter(logging.Formatter(_DEVELOPMENT_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    return logger
