"""Structlog configuration.

The terminal belongs to the UI, so log output goes to a file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

import structlog

_log_file: TextIO | None = None


def configure(path: Path, level: str = "info") -> None:
    """Route structlog output to ``path`` at ``level`` and above."""
    global _log_file

    path.parent.mkdir(parents=True, exist_ok=True)
    if _log_file is not None:
        _log_file.close()
    _log_file = open(path, "a", encoding="utf-8")

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.WriteLoggerFactory(file=_log_file),
        cache_logger_on_first_use=False,
    )
