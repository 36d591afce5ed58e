"""
Palette Visibility Bus
----------------------
Publish/subscribe channel for palette open/close/toggle signals.

Rules:
- No payload, no command state: coordination only
- Listeners run synchronously, in registration order
- One listener's failure never stops the others or reaches the emitter
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union
import logging

from .errors import ErrorHandler, ListenerError


Listener = Callable[[], Any]


class PaletteEvent(str, Enum):
    """The three visibility signals."""
    OPEN = "open"
    CLOSE = "close"
    TOGGLE = "toggle"


class VisibilityBus:
    """
    Event channel coordinating palette show/hide.

    Each event kind keeps an insertion-ordered set of listeners.
    Registering the same listener twice for one event is a no-op.
    """

    def __init__(self, error_handler: Optional[ErrorHandler] = None):
        self._listeners: Dict[PaletteEvent, Dict[Listener, None]] = {
            event: {} for event in PaletteEvent
        }
        self._error_handler = error_handler or ErrorHandler()
        self._logger = logging.getLogger("palette.core.visibility_bus")

    @property
    def error_handler(self) -> ErrorHandler:
        return self._error_handler

    def on(self, event: Union[PaletteEvent, str], listener: Listener) -> None:
        """Add a listener for an event."""
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")
        self._listeners[PaletteEvent(event)][listener] = None

    def off(self, event: Union[PaletteEvent, str], listener: Listener) -> None:
        """Remove a listener. Unknown listeners are ignored."""
        self._listeners[PaletteEvent(event)].pop(listener, None)

    def emit(self, event: Union[PaletteEvent, str]) -> List[ListenerError]:
        """
        Invoke every listener for `event`.

        Listeners are snapshotted first, so a listener may subscribe or
        unsubscribe during emission without affecting this round.

        Returns:
            The failures that occurred; empty when all listeners succeeded.
        """
        event = PaletteEvent(event)
        listeners = list(self._listeners[event])
        failures: List[ListenerError] = []

        self._logger.debug(
            f"Emitting {event.value} to {len(listeners)} listeners",
            extra={"event": event.value},
        )

        for listener in listeners:
            try:
                listener()
            except Exception as e:
                error = ListenerError(event.value, listener, e)
                error.__cause__ = e
                self._error_handler.handle(error)
                failures.append(error)

        return failures

    def open(self) -> List[ListenerError]:
        """Request that the palette be shown."""
        return self.emit(PaletteEvent.OPEN)

    def close(self) -> List[ListenerError]:
        """Request that the palette be hidden."""
        return self.emit(PaletteEvent.CLOSE)

    def toggle(self) -> List[ListenerError]:
        """Request that the palette flip visibility."""
        return self.emit(PaletteEvent.TOGGLE)

    def listener_count(self, event: Union[PaletteEvent, str]) -> int:
        return len(self._listeners[PaletteEvent(event)])

    def clear(self) -> None:
        """Remove all listeners for all events."""
        for listeners in self._listeners.values():
            listeners.clear()


# Process-wide bus instance
_bus: Optional[VisibilityBus] = None


def get_visibility_bus() -> VisibilityBus:
    """Get the global visibility bus."""
    global _bus
    if _bus is None:
        _bus = VisibilityBus()
    return _bus


def reset_visibility_bus() -> None:
    """Drop the global bus (tests only)."""
    global _bus
    _bus = None
