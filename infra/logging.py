"""
Palette Centralized Logging
---------------------------
Structured logging with dispatch_id propagation.

Design:
- Every command dispatch gets a unique dispatch_id
- dispatch_id reaches every log record emitted while the command runs,
  including records from inside the command's own callback
- Console output through Rich, file output as JSON lines
- Severity discipline: DEBUG=registration detail, INFO=state,
  WARNING=recoverable, ERROR=listener or callback failure

Usage:
    from infra.logging import get_logger, DispatchContext

    logger = get_logger("commands.registry")

    with DispatchContext() as dispatch_id:
        logger.info("Executing file.save")
"""

from datetime import datetime, timezone
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, Optional
import contextvars
import json
import logging
import uuid

from rich.console import Console
from rich.logging import RichHandler


ROOT_LOGGER = "palette"

# Context variable for dispatch_id - thread-safe and async-safe
_dispatch_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "dispatch_id", default=None
)


def generate_dispatch_id() -> str:
    """Generate a unique dispatch ID."""
    return f"dispatch_{uuid.uuid4().hex[:12]}"


def get_dispatch_id() -> Optional[str]:
    """Get the current dispatch ID from context."""
    return _dispatch_id_var.get()


class DispatchContext:
    """
    Context manager scoping one command dispatch.

    Usage:
        with DispatchContext() as dispatch_id:
            # All logs within this block carry dispatch_id
            command.execute()
    """

    def __init__(self, dispatch_id: Optional[str] = None):
        self._dispatch_id = dispatch_id or generate_dispatch_id()
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = _dispatch_id_var.set(self._dispatch_id)
        return self._dispatch_id

    def __exit__(self, *args) -> None:
        if self._token is not None:
            _dispatch_id_var.reset(self._token)
            self._token = None


class DispatchIdFilter(logging.Filter):
    """Logging filter that adds dispatch_id to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "dispatch_id", None) is None:
            record.dispatch_id = get_dispatch_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured file logging."""

    EXTRA_FIELDS = ("command_id", "shortcut", "event", "details")

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "dispatch_id": getattr(record, "dispatch_id", "-"),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key in self.EXTRA_FIELDS:
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        return json.dumps(log_entry, default=str)


class DispatchConsoleFormatter(logging.Formatter):
    """Prefixes console messages with the dispatch id when one is active."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        dispatch_id = getattr(record, "dispatch_id", "-")
        if dispatch_id != "-":
            return f"[{dispatch_id}] {message}"
        return message


# Global configuration state
_logging_initialized = False
_log_file_path: Optional[Path] = None


def configure_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    console: bool = True,
    file: bool = False,
    rich_console: Optional[Console] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 3,
) -> None:
    """
    Configure the palette logging system.

    Args:
        level: Logging level (default INFO)
        log_dir: Directory for log files (default: ./logs)
        console: Enable Rich console output
        file: Enable JSON file output
        rich_console: Console to render to (default: stderr)
        max_bytes: Rotate the log file past this size
        backup_count: Rotated files to keep
    """
    global _logging_initialized, _log_file_path

    if _logging_initialized:
        return

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(logging.DEBUG if file else level)
    root_logger.handlers.clear()

    dispatch_filter = DispatchIdFilter()

    if console:
        console_handler = RichHandler(
            console=rich_console or Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
        )
        console_handler.setLevel(level)
        console_handler.setFormatter(DispatchConsoleFormatter("%(name)s: %(message)s"))
        console_handler.addFilter(dispatch_filter)
        root_logger.addHandler(console_handler)

    if file:
        log_path = Path(log_dir) if log_dir else Path("logs")
        log_path.mkdir(parents=True, exist_ok=True)

        _log_file_path = log_path / "palette.log"

        file_handler = RotatingFileHandler(
            str(_log_file_path),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)  # File gets everything
        file_handler.setFormatter(JSONFormatter())
        file_handler.addFilter(dispatch_filter)
        root_logger.addHandler(file_handler)

    _logging_initialized = True


def reset_logging() -> None:
    """Remove configured handlers so configure_logging() can run again."""
    global _logging_initialized, _log_file_path

    root_logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    _logging_initialized = False
    _log_file_path = None


def get_log_file_path() -> Optional[Path]:
    return _log_file_path


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger in the palette namespace.

    Args:
        name: Logger name (prefixed with 'palette.' if not already)
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)


def with_dispatch_context(func: Callable) -> Callable:
    """
    Decorator to wrap a function in a dispatch context.

    The wrapped function receives dispatch_id as a keyword argument.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        with DispatchContext() as dispatch_id:
            kwargs["dispatch_id"] = dispatch_id
            return func(*args, **kwargs)
    return wrapper
