"""
Logging setup for kmzlens.

Console output is coloured in development and plain elsewhere; an optional
rotating log file can be written as plain text or JSON records. Fields passed
through `extra=` or LogContext end up as top-level keys of JSON records.
"""

import json
import logging
import logging.handlers
import sys
import threading
from contextvars import ContextVar, Token
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from kmzlens.core.config import settings

# Attributes of a bare LogRecord; everything else on a record came from `extra`
_STANDARD_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

CONSOLE_FORMAT = "%(levelname)s | %(asctime)s | %(name)s:%(lineno)d | %(message)s"
FILE_FORMAT = (
    "%(asctime)s - %(levelname)s - %(name)s - "
    "%(module)s:%(funcName)s:%(lineno)d - %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _STANDARD_RECORD_FIELDS
        )
        return json.dumps(payload, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter that colours the level name with ANSI codes."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)

        # Other handlers share the record, so the plain name is put back
        plain = record.levelname
        record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def get_log_level(level_name: str) -> int:
    """
    Logging constant for a level name; unknown names map to INFO.

    Examples:
        >>> get_log_level("warning")
        30
    """
    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else logging.INFO


def _console_handler(level: int, json_logs: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if json_logs:
        handler.setFormatter(JSONFormatter())
    elif settings.environment == "development":
        handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    else:
        handler.setFormatter(
            logging.Formatter(CONSOLE_FORMAT.replace(" | ", " - "), datefmt=DATE_FORMAT)
        )
    return handler


def _file_handler(log_file: Path, level: int, json_logs: bool) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(
        JSONFormatter() if json_logs else logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT)
    )
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    json_logs: bool = False,
    enable_console: bool = True,
) -> None:
    """
    Configure the root logger for the application.

    Replaces any handlers already on the root logger.

    Args:
        log_level: Level name; defaults to settings.log_level, else DEBUG in
            development and INFO elsewhere
        log_file: Rotating log file to write in addition to the console
        json_logs: Write console and log file output as JSON records
        enable_console: Log to stdout
    """
    install_log_context_factory()

    if log_level is None:
        log_level = settings.log_level or (
            "DEBUG" if settings.environment == "development" else "INFO"
        )
    level = get_log_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if enable_console:
        root_logger.addHandler(_console_handler(level, json_logs))
    if log_file:
        root_logger.addHandler(_file_handler(Path(log_file), level, json_logs))

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    root_logger.info(
        f"Logging initialized: level={logging.getLevelName(level)}, "
        f"environment={settings.environment}, json_logs={json_logs}, "
        f"file={log_file}"
    )


# Fields of the innermost LogContext active in the current thread or task
_context_fields: ContextVar[Mapping[str, Any]] = ContextVar(
    "kmzlens_log_context", default=MappingProxyType({})
)
_factory_lock = threading.Lock()
_factory_installed = False


def install_log_context_factory() -> None:
    """
    Install, once per process, the record factory that applies LogContext fields.

    The factory reads the fields from a context variable, so each thread and
    each asyncio task sees only the contexts it entered itself.
    """
    global _factory_installed
    with _factory_lock:
        if _factory_installed:
            return

        base_factory = logging.getLogRecordFactory()

        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = base_factory(*args, **kwargs)
            for key, value in _context_fields.get().items():
                setattr(record, key, value)
            return record

        logging.setLogRecordFactory(record_factory)
        _factory_installed = True


class LogContext:
    """
    Attach fields to every record created inside the block.

    Contexts nest: inner fields are added to, or override, outer ones until
    the inner block exits. Keys passed through `extra=` must not repeat a
    context field.

    Usage:
        with LogContext(request_id="123", source_entry="doc.kml"):
            logger.info("Parsing archive")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._token: Optional[Token] = None

    def __enter__(self) -> "LogContext":
        install_log_context_factory()
        merged = {**_context_fields.get(), **self.fields}
        self._token = _context_fields.set(MappingProxyType(merged))
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._token is not None:
            _context_fields.reset(self._token)
            self._token = None
