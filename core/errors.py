"""
Error Handling Module
---------------------
Typed errors for the command palette core.

Rules:
- Registration problems fail fast (ValidationError at register time)
- Unknown ids are signalled, never fatal (NotFoundError)
- Listener failures are isolated and logged (ListenerError)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional
import logging
import traceback


class ErrorCategory(Enum):
    """Categories of errors for handling decisions."""
    VALIDATION_ERROR = auto()   # Malformed command or configuration
    NOT_FOUND = auto()          # Lookup by unknown id
    LISTENER_ERROR = auto()     # Visibility bus listener raised
    EXECUTION_ERROR = auto()    # Command callback raised
    CONFIG_ERROR = auto()       # Configuration file could not be used


class PaletteError(Exception):
    """Base class for all command palette errors."""

    category: ErrorCategory = ErrorCategory.VALIDATION_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(PaletteError):
    """A command (or batch, or config) failed structural validation."""

    category = ErrorCategory.VALIDATION_ERROR

    def __init__(self, message: str, command_id: Optional[str] = None, field: str = ""):
        super().__init__(message, details={"command_id": command_id, "field": field})
        self.command_id = command_id
        self.field = field


class NotFoundError(PaletteError):
    """No command is registered under the requested id."""

    category = ErrorCategory.NOT_FOUND

    def __init__(self, command_id: str):
        super().__init__(f"Command not found: {command_id}", details={"command_id": command_id})
        self.command_id = command_id


class ListenerError(PaletteError):
    """A visibility bus listener raised during emission."""

    category = ErrorCategory.LISTENER_ERROR

    def __init__(self, event: str, listener: Callable[[], Any], original: BaseException):
        name = getattr(listener, "__qualname__", repr(listener))
        super().__init__(
            f"Listener {name} failed on '{event}': {original}",
            details={"event": event, "listener": name},
        )
        self.event = event
        self.listener = listener
        self.original = original


@dataclass
class ErrorRecord:
    """
    Structured record of a handled error.

    Kept in the ErrorHandler history for post-mortems.
    """
    category: ErrorCategory
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    stack_trace: Optional[str] = None

    @classmethod
    def from_exception(cls, exception: BaseException) -> "ErrorRecord":
        """Create a record from an exception."""
        if isinstance(exception, PaletteError):
            category = exception.category
            details = dict(exception.details)
        else:
            category = ErrorCategory.EXECUTION_ERROR
            details = {}

        # Wrapped errors are never raised themselves; the cause holds the trace
        source = exception.__cause__ or exception
        trace = None
        if source.__traceback__ is not None:
            trace = "".join(traceback.format_exception(
                type(source), source, source.__traceback__
            ))

        return cls(
            category=category,
            message=str(exception),
            details=details,
            stack_trace=trace,
        )

    def __repr__(self) -> str:
        return f"ErrorRecord({self.category.name}: {self.message})"


class ErrorHandler:
    """
    Central error handler with logging and bounded history.
    """

    LEVELS: Dict[ErrorCategory, int] = {
        ErrorCategory.VALIDATION_ERROR: logging.WARNING,
        ErrorCategory.NOT_FOUND: logging.INFO,
        ErrorCategory.LISTENER_ERROR: logging.ERROR,
        ErrorCategory.EXECUTION_ERROR: logging.ERROR,
        ErrorCategory.CONFIG_ERROR: logging.ERROR,
    }

    def __init__(self, max_history: int = 100):
        self._logger = logging.getLogger("palette.errors")
        self._error_history: List[ErrorRecord] = []
        self._max_history = max_history

    def handle(self, error: BaseException) -> ErrorRecord:
        """Log an error and store it in history."""
        record = ErrorRecord.from_exception(error)
        self._log_error(record)

        self._error_history.append(record)
        if len(self._error_history) > self._max_history:
            self._error_history.pop(0)

        return record

    def _log_error(self, record: ErrorRecord) -> None:
        """Log error with appropriate level."""
        level = self.LEVELS.get(record.category, logging.ERROR)

        self._logger.log(
            level,
            f"{record.category.name}: {record.message}",
            extra={"details": record.details},
        )

        if record.stack_trace and level >= logging.ERROR:
            self._logger.debug(f"Stack trace:\n{record.stack_trace}")

    @property
    def history(self) -> List[ErrorRecord]:
        return list(self._error_history)

    def get_error_stats(self) -> Dict[str, int]:
        """Get error counts per category."""
        stats: Dict[str, int] = {}
        for record in self._error_history:
            key = record.category.name
            stats[key] = stats.get(key, 0) + 1
        return stats

    def clear_history(self) -> None:
        """Clear error history."""
        self._error_history.clear()
