"""Logging setup for scripts and the CLI; the library itself only emits records."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stderr handler to the package logger at ``level``."""
    package_logger = logging.getLogger("paired_swings")
    package_logger.setLevel(level.upper())
    if not any(getattr(h, "_paired_swings", False) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._paired_swings = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)
    return package_logger
