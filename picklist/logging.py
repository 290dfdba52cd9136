"""Logging for the picklist API.

Events are snake_case names with keyword context, e.g.
``logger.info("trip_recorded", list_id=..., items=3)``. Request handlers get
``request_id`` bound automatically by the middleware in ``picklist.main``.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

import structlog

from picklist.config import settings


class _TeeWriter:
    """File-like target for PrintLogger: stdout plus the LOG_FILE path."""

    def __init__(self, file_path: str) -> None:
        self._file: IO[str] | None = None
        try:
            self._file = open(file_path, "a")  # noqa: SIM115
        except OSError as exc:
            # structlog is not configured yet at this point
            print(f"WARNING: cannot open log file {file_path!r}: {exc}", file=sys.stderr)

    def _disable_file(self, action: str) -> None:
        self._file = None
        print(f"WARNING: log file {action} failed, file logging disabled", file=sys.stderr)

    def write(self, data: str) -> None:
        sys.stdout.write(data)
        if self._file is None:
            return
        try:
            self._file.write(data)
            self._file.flush()
        except (OSError, ValueError):
            self._disable_file("write")

    def flush(self) -> None:
        sys.stdout.flush()
        if self._file is None:
            return
        try:
            self._file.flush()
        except (OSError, ValueError):
            self._disable_file("flush")


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    """Set up structlog from ``settings``. Call once, before the app is built."""
    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.environment == "development"
        else structlog.processors.JSONRenderer()
    )

    sink = _TeeWriter(settings.log_file) if settings.log_file else None
    logger_factory = structlog.PrintLoggerFactory(file=sink)  # type: ignore[arg-type]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(settings.log_level)),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )
