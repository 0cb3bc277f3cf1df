"""Structured logging for reconciliation runs.

Levels:
- INFO (20): One line per lifecycle operation (default)
- VERBOSE (15): Endpoint selection and drift decisions
- DEBUG (10): Request/response bodies
- TRACE (5): Everything
"""

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import structlog

# Fields bound by LogContext/add_context and merged into every event
_log_context: ContextVar[dict[str, Any]] = ContextVar("reconciler_log_context", default={})

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

LOG_LEVELS = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "VERBOSE": VERBOSE,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class LogContext:
    """
    Bind fields such as operation and resource ID for the duration of a block.

    Usage:
        with LogContext(operation="create", resource="fabric_join_node"):
            logger.info("Joining node")
    """

    def __init__(self, **fields: Any) -> None:
        self.fields = fields
        self.token = None

    def __enter__(self) -> "LogContext":
        merged = {**_log_context.get(), **self.fields}
        self.token = _log_context.set(merged)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.token:
            _log_context.reset(self.token)


def add_context(**fields: Any) -> None:
    """Bind fields to the current execution context until cleared."""
    _log_context.set({**_log_context.get(), **fields})


def clear_context(key: str) -> None:
    """Remove a single bound field."""
    current = _log_context.get()
    if key in current:
        _log_context.set({k: v for k, v in current.items() if k != key})


def clear_all_context() -> None:
    """Drop every bound field."""
    _log_context.set({})


def get_context() -> dict[str, Any]:
    """Return a copy of the currently bound fields."""
    return dict(_log_context.get())


def _context_processor(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor merging bound context into the event."""
    for key, value in _log_context.get().items():
        event_dict.setdefault(key, value)
    return event_dict


def get_log_level(level: str) -> int:
    """
    Get numeric log level from string.

    Unknown names fall back to INFO.
    """
    return LOG_LEVELS.get(level.upper(), logging.INFO)


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    log_file: str | Path | None = None,
) -> None:
    """
    Configure structlog on top of the standard logging module.

    Args:
        level: Logging level (TRACE, DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Whether to render events as JSON instead of console output
        log_file: Optional path to also write logs to
    """
    log_level = get_log_level(level)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        file_path = Path(log_file)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(file_path))

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=handlers,
        force=True,
    )
    logging.getLogger().setLevel(log_level)
    # httpx logs every request at INFO; keep it out of summary output
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _context_processor,
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
