"""Logging setup shared by the library and the command line entry point."""

from __future__ import annotations

import logging

from rstgen.config import RSTGEN_LOG_LEVEL

_ROOT_LOGGER = "rstgen"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger below the ``rstgen`` namespace."""
    return logging.getLogger(name)


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach one stream handler to the ``rstgen`` logger.

    Calling it again only updates the level. Library code never calls this;
    it is meant for applications and the CLI.
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    resolved = level if level is not None else RSTGEN_LOG_LEVEL
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.WARNING
    logger.setLevel(resolved)
    if not any(getattr(h, "_rstgen_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._rstgen_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
