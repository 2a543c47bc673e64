"""Logging setup shared by the command-line entry points."""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logger(level: str | int | None = None) -> None:
    """Configure root logging to stderr; level defaults to LOG_LEVEL or INFO."""
    resolved = level or os.getenv("LOG_LEVEL", "INFO")
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
    logging.basicConfig(level=resolved, format=LOG_FORMAT, stream=sys.stderr, force=True)


__all__ = ["setup_logger", "LOG_FORMAT"]
