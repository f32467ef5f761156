"""Structured logging for the storefront E2E harness.

Every module logs through ``structlog.get_logger()``. ``configure_logging``
routes those loggers to stdout using the ``logging.*`` configuration keys,
and ``LogContext`` tags every line emitted while a test runs with its name.
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, Optional

import structlog


def configure_logging(config, level: Optional[str] = None) -> None:
    """Configure structlog from the harness configuration.

    Args:
        config: ConfigManager supplying ``logging.level`` and ``logging.json``
        level: Overrides ``logging.level``, e.g. from ``--harness-log-level``

    Raises:
        ValueError: If the level is not a standard logging level name
    """
    level_name = (level or config.get("logging.level", "INFO")).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level {level_name!r}")

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)
    logging.getLogger().setLevel(numeric_level)

    if config.get("logging.json", False):
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class LogContext:
    """Tag every log line emitted inside the block with ``test_name``.

    Nested contexts restore the outer values on exit:

        with LogContext("tests/test_cart.py::test_add_to_cart"):
            await reporter.log_step("Added Blue Top")
    """

    def __init__(self, test_name: str, **context: Any):
        self.context = {"test_name": test_name, **context}
        self._tokens = None

    def __enter__(self) -> "LogContext":
        self._tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._tokens is not None:
            structlog.contextvars.reset_contextvars(**self._tokens)
            self._tokens = None


@contextmanager
def log_operation(log, operation: str, **context: Any):
    """Log the outcome and duration of ``operation`` on ``log``.

    Yields a dict; fields the block adds to it are included in the
    completion line. Exceptions are logged and re-raised.
    """
    log = log.bind(operation=operation, **context)
    fields: dict[str, Any] = {}
    started = time.monotonic()
    try:
        yield fields
    except Exception as e:
        log.error("Operation failed", error=str(e), **fields)
        raise
    log.info("Operation completed", duration_ms=round((time.monotonic() - started) * 1000, 1), **fields)
