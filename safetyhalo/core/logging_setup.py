from __future__ import annotations

import logging
import sys

LOGGER_NAME = "safetyhalo"
LOG_FORMAT = "[%(levelname)s] %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a single stderr handler to the package logger.

    Calling it again only updates the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not any(getattr(h, "_safetyhalo", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._safetyhalo = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False
    return logger
