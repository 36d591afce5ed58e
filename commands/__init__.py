# Commands module - Command model, registry, matching and shortcuts
# This module does NOT execute commands; dispatch lives in core.palette
# No palette visibility state here

from .keys import Shortcut, parse_shortcut, normalize_shortcut, shortcut_from_event
from .model import Command, CommandCategory, DangerLevel, is_available
from .registry import (
    CommandRegistry, validate_command,
    get_command_registry, reset_command_registry
)
from .matcher import QueryMatcher, SearchResult, MatchKind, CommandGroup, group_by_category
from .shortcuts import ShortcutResolver
from .usage import UsageTracker, CommandUsage

__all__ = [
    # Keys
    "Shortcut",
    "parse_shortcut",
    "normalize_shortcut",
    "shortcut_from_event",
    # Model
    "Command",
    "CommandCategory",
    "DangerLevel",
    "is_available",
    # Registry
    "CommandRegistry",
    "validate_command",
    "get_command_registry",
    "reset_command_registry",
    # Matching
    "QueryMatcher",
    "SearchResult",
    "MatchKind",
    "CommandGroup",
    "group_by_category",
    # Shortcuts
    "ShortcutResolver",
    # Usage
    "UsageTracker",
    "CommandUsage",
]
