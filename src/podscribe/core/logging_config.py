"""Logging configuration for podscribe using structlog.

Logs go to stderr so that the CLI's progress bar and result table on
stdout stay readable. Three renderers are available: ``colored`` for an
interactive terminal, ``plain`` for redirected output, and ``json`` for
batch runs whose logs are collected elsewhere.
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Any

import structlog

LOG_FORMATS = ("colored", "plain", "json")

# Loggers of the HTTP and SDK clients, quiet unless something goes wrong
_NOISY_LOGGERS = ("aiohttp", "httpx", "openai", "groq", "anthropic")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    if log_format == "colored":
        return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "colored",
    log_timestamps: bool = True,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        log_format: One of ``colored``, ``plain`` or ``json``; unknown values
            fall back to ``plain``
        log_timestamps: Whether to include ISO timestamps
    """
    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
    ]
    if log_timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(log_format),
        ]
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper(), logging.INFO),
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)


class Timer:
    """Times a pipeline stage and logs ``<op>_started`` / ``_completed`` / ``_failed``.

    ``complete()`` logs the completion early with extra fields; otherwise a
    bare completion is logged on exit. Durations are in milliseconds.

    Example:
        with Timer(logger, "stage_download", url=url) as timer:
            acquired = await acquirer.acquire(resolved, work_dir)
            timer.complete(file_size_mb=acquired.file_size_mb)
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **context: Any,
    ) -> None:
        self.logger = logger.bind(operation=operation, **context)
        self.operation = operation
        self.start_time: float = 0.0
        self._completed = False

    def _elapsed_ms(self) -> float:
        return round((time.monotonic() - self.start_time) * 1000, 2)

    def __enter__(self) -> Timer:
        self.start_time = time.monotonic()
        self.logger.info(f"{self.operation}_started")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None:
            self.logger.error(
                f"{self.operation}_failed",
                duration_ms=self._elapsed_ms(),
                error_type=exc_type.__name__,
                error=str(exc_val) if exc_val else None,
            )
        elif not self._completed:
            self.logger.info(f"{self.operation}_completed", duration_ms=self._elapsed_ms())

    def complete(self, **extra_context: Any) -> None:
        """Log completion now, with ``extra_context`` attached."""
        self._completed = True
        self.logger.info(
            f"{self.operation}_completed",
            duration_ms=self._elapsed_ms(),
            **extra_context,
        )
