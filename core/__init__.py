# Core module - Errors and the palette visibility bus
#
# core.palette (the CommandPalette facade) depends on the commands package,
# which depends on core.errors, so it is imported explicitly:
#     from core.palette import CommandPalette

from .errors import (
    PaletteError, ValidationError, NotFoundError, ListenerError,
    ErrorCategory, ErrorHandler, ErrorRecord
)
from .visibility_bus import (
    VisibilityBus, PaletteEvent, get_visibility_bus, reset_visibility_bus
)

__all__ = [
    "PaletteError", "ValidationError", "NotFoundError", "ListenerError",
    "ErrorCategory", "ErrorHandler", "ErrorRecord",
    "VisibilityBus", "PaletteEvent", "get_visibility_bus", "reset_visibility_bus",
]
