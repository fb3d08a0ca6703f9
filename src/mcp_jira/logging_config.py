"""Contextual logging configuration for MCP Jira."""

import logging
import os
import sys
import time
import types
import uuid
from collections.abc import Mapping
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, cast

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] [%(context)s] %(message)s"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_DIRECTORY = "logs"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 5

# Each asyncio task gets its own copy of the context on creation.
_log_context: ContextVar[dict[str, Any]] = ContextVar("mcp_jira_log_context")


def get_log_context() -> dict[str, Any]:
    return _log_context.get({})


def _format_context(context: Mapping[str, Any]) -> str:
    if not context:
        return "no-context"
    return ",".join(f"{k}={v}" for k, v in context.items())


class ContextualLogger(logging.Logger):
    """Logger that stamps every record with the active operation context."""

    def _log(
        self,
        level: int,
        msg: object,
        args: tuple[object, ...] | Mapping[str, object],
        exc_info: Any = None,
        extra: Mapping[str, object] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
    ) -> None:
        extra = dict(extra or {})
        extra.setdefault("context", _format_context(get_log_context()))
        super()._log(level, msg, args, exc_info, extra, stack_info, stacklevel + 1)


class _ContextFilter(logging.Filter):
    """Fill in ``context`` for records coming from plain loggers."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = _format_context(get_log_context())
        return True


class LoggingContextManager:
    """Context manager that scopes log context to one operation."""

    def __init__(self, logger: logging.Logger, operation: str, **context: Any) -> None:
        self.logger = logger
        self.operation = operation
        self.context = dict(context)
        self.trace_id = str(context.get("trace_id") or uuid.uuid4())[:8]
        self.start_time = 0.0
        self._token: Token[dict[str, Any]] | None = None

    def __enter__(self) -> "LoggingContextManager":
        self.start_time = time.monotonic()
        merged = {
            **get_log_context(),
            **self.context,
            "operation": self.operation,
            "trace_id": self.trace_id,
        }
        self._token = _log_context.set(merged)
        self.logger.debug(f"Operation started: {self.operation}")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        duration = time.monotonic() - self.start_time
        if exc_type:
            self.logger.error(
                f"Operation failed: {self.operation} after {duration:.3f}s - {exc_val}"
            )
        else:
            self.logger.debug(
                f"Operation completed: {self.operation} in {duration:.3f}s"
            )
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None


def setup_logger(
    name: str = "mcp-jira",
    level: str | None = None,
    log_to_file: bool = False,
    log_dir: str | None = None,
    log_format: str | None = None,
) -> ContextualLogger:
    """
    Configures and returns a contextual logger.

    Console output goes to stderr because stdout carries the MCP stdio stream.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, etc.), falls back to ``LOG_LEVEL``
        log_to_file: If True, also logs to a rotating file
        log_dir: Directory to store log files, falls back to ``LOG_DIR``
        log_format: Log format, falls back to ``LOG_FORMAT``

    Returns:
        Configured contextual logger
    """
    logging.setLoggerClass(ContextualLogger)
    logger = logging.getLogger(name)

    log_level = level or os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    formatter = logging.Formatter(log_format or os.getenv("LOG_FORMAT", DEFAULT_FORMAT))

    # Re-running setup (e.g. from the CLI after import) must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(_ContextFilter())
    logger.addHandler(console_handler)

    if log_to_file:
        log_directory = Path(log_dir or os.getenv("LOG_DIR", DEFAULT_LOG_DIRECTORY))
        log_directory.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_directory / f"{name}.log",
            maxBytes=MAX_LOG_SIZE,
            backupCount=LOG_BACKUP_COUNT,
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(_ContextFilter())
        logger.addHandler(file_handler)

    logger.propagate = False
    return cast(ContextualLogger, logger)


def log_operation(
    logger: logging.Logger, operation: str, **context: Any
) -> LoggingContextManager:
    """
    Creates a context manager for operation logging.

    Args:
        logger: Logger to report start/end of the operation on
        operation: Name of the operation
        **context: Additional context data (e.g. ``issue_key``)

    Returns:
        Context manager configured for operation logging
    """
    return LoggingContextManager(logger, operation, **context)
