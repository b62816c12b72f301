"""Shared logging configuration."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_CONFIGURED = False


def setup_logging(level: str | int = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    global _CONFIGURED  # noqa: PLW0603
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    if _CONFIGURED:
        root.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    logging.captureWarnings(True)
    _CONFIGURED = True
