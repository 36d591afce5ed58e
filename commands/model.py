"""
Command Model
-------------
Immutable descriptor for a single invocable action.

A Command carries everything the palette needs to find, rank and
dispatch it. What the action does is opaque: `execute` is a
zero-argument callable supplied by the feature module.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union
import logging

from .keys import Shortcut


class CommandCategory(str, Enum):
    """
    Closed set of command categories.

    Declaration order is the display order used when grouping.
    """
    FILE = "file"
    EDIT = "edit"
    VIEW = "view"
    THEME = "theme"
    SESSION = "session"
    TOOLS = "tools"
    WINDOW = "window"
    NAVIGATION = "navigation"
    SETTINGS = "settings"
    HELP = "help"

    @property
    def order(self) -> int:
        return list(CommandCategory).index(self)


class DangerLevel(str, Enum):
    """How careful the host should be before running a command."""
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class Command:
    """
    A named, invocable unit of application behavior.

    `category` and `shortcut` may be given as plain strings; the registry
    stores the canonical CommandCategory / Shortcut values.
    """
    id: str
    title: str
    category: Union[CommandCategory, str]
    execute: Callable[[], Any]
    keywords: Tuple[str, ...] = ()
    shortcut: Optional[Union[Shortcut, str]] = None
    is_available: Optional[Callable[[], bool]] = None
    description: str = ""
    danger_level: DangerLevel = DangerLevel.SAFE
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        # Lists are accepted for convenience; stored as a tuple
        if not isinstance(self.keywords, tuple):
            object.__setattr__(self, "keywords", tuple(self.keywords or ()))

    @property
    def shortcut_text(self) -> Optional[str]:
        """Display form of the shortcut."""
        return str(self.shortcut) if self.shortcut is not None else None

    def available(self) -> bool:
        """Evaluate the availability predicate (absent means available)."""
        if self.is_available is None:
            return True
        return bool(self.is_available())

    def __repr__(self) -> str:
        return f"Command(id={self.id}, title={self.title!r})"


def is_available(command: Command, logger: logging.Logger) -> bool:
    """
    Evaluate a command's availability, treating a raising predicate as unavailable.

    The failure is logged at WARNING on `logger`.
    """
    try:
        return command.available()
    except Exception as e:
        logger.warning(
            f"Availability check failed for {command.id}: {e}",
            extra={"command_id": command.id},
        )
        return False
