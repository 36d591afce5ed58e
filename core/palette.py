"""
Command Palette
---------------
Composition root for the palette core: registry, matcher, shortcut
resolver, visibility bus and usage tracking.

Dispatch is a lookup followed by exactly one call to the command's
`execute`. Callbacks are fire-and-forget: whatever they return is
ignored, never awaited. A failing callback propagates to the caller
and leaves registry, matcher and resolver untouched.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Union
import logging
import time

from commands.keys import Shortcut
from commands.matcher import CommandGroup, QueryMatcher, SearchResult, group_by_category
from commands.model import Command, DangerLevel, is_available
from commands.registry import CommandRegistry, get_command_registry
from commands.shortcuts import ShortcutResolver
from commands.usage import UsageTracker
from infra.config import PaletteConfig
from infra.logging import DispatchContext

from .visibility_bus import VisibilityBus, get_visibility_bus


class DispatchStatus(Enum):
    """Outcome of a dispatch attempt."""
    EXECUTED = "executed"
    UNAVAILABLE = "unavailable"
    NEEDS_CONFIRMATION = "needs_confirmation"


@dataclass
class DispatchResult:
    """Result of a dispatch attempt."""
    status: DispatchStatus
    command: Command
    dispatch_id: Optional[str] = None
    execution_time_ms: float = 0.0

    @property
    def executed(self) -> bool:
        return self.status is DispatchStatus.EXECUTED

    def __repr__(self) -> str:
        return f"DispatchResult({self.status.value} {self.command.id})"


class CommandPalette:
    """
    Entry point the host application talks to.

    Responsibilities:
    - Registration (delegated to the registry)
    - Search and shortcut resolution
    - Dispatch with availability and confirmation checks
    - Closing the palette around execution
    """

    def __init__(
        self,
        registry: Optional[CommandRegistry] = None,
        bus: Optional[VisibilityBus] = None,
        config: Optional[PaletteConfig] = None,
        usage: Optional[UsageTracker] = None,
    ):
        self.config = config or PaletteConfig()
        self.registry = registry if registry is not None else get_command_registry()
        self.bus = bus if bus is not None else get_visibility_bus()
        self.usage = usage if usage is not None else UsageTracker()
        self.matcher = QueryMatcher(self.registry, max_results=self.config.max_results)
        self.resolver = ShortcutResolver(
            self.registry,
            overrides=self.config.shortcut_overrides,
            enabled=self.config.shortcuts_enabled,
        )
        self._logger = logging.getLogger("palette.core.palette")

    # Registration

    def register(self, command: Command) -> None:
        self.registry.register(command)

    def register_many(self, commands: Iterable[Command]) -> None:
        self.registry.register_many(commands)

    def unregister(self, command_id: str) -> bool:
        """Remove a command and its usage statistics."""
        self.usage.forget(command_id)
        return self.registry.unregister(command_id)

    # Lookup

    def search(self, query_text: str, limit: Optional[int] = None) -> List[SearchResult]:
        return self.matcher.search(query_text, limit=limit)

    def search_grouped(self, query_text: Optional[str]) -> List[CommandGroup]:
        """
        Search for display.

        The empty query is grouped by category (when configured); a real
        query stays a single ungrouped block so score order is kept.
        """
        results = self.search(query_text)
        if not results:
            return []
        if (query_text or "").strip() or not self.config.group_by_category:
            return [CommandGroup(None, tuple(results))]
        return group_by_category(results)

    def resolve(self, key_combination: Union[str, Shortcut]) -> Optional[Command]:
        return self.resolver.resolve(key_combination)

    # Dispatch

    def requires_confirmation(self, command: Command) -> bool:
        return (
            self.config.confirm_dangerous_commands
            and command.danger_level is not DangerLevel.SAFE
        )

    def execute(self, command: Union[Command, str], confirmed: bool = False) -> DispatchResult:
        """
        Run a command exactly once.

        Args:
            command: A Command or a registered command id
            confirmed: The user has confirmed a warning/danger command

        Raises:
            NotFoundError: Unknown command id
            Exception: Whatever the command's callback raised
        """
        if isinstance(command, str):
            command = self.registry.get_by_id(command)

        if not is_available(command, self._logger):
            self._logger.warning(
                f"Command is unavailable: {command.id}", extra={"command_id": command.id}
            )
            return DispatchResult(DispatchStatus.UNAVAILABLE, command)

        if self.requires_confirmation(command) and not confirmed:
            self._logger.info(
                f"Command needs confirmation: {command.id}", extra={"command_id": command.id}
            )
            return DispatchResult(DispatchStatus.NEEDS_CONFIRMATION, command)

        if self.config.close_on_execute:
            self.bus.close()

        with DispatchContext() as dispatch_id:
            self._logger.info(f"Executing {command.id}", extra={"command_id": command.id})
            start = time.perf_counter()
            try:
                command.execute()
            except Exception:
                self._logger.exception(
                    f"Command execution failed: {command.id}", extra={"command_id": command.id}
                )
                raise
            elapsed_ms = (time.perf_counter() - start) * 1000

        self.usage.record(command.id)
        return DispatchResult(DispatchStatus.EXECUTED, command, dispatch_id, elapsed_ms)

    def dispatch_shortcut(
        self, key_combination: Union[str, Shortcut], confirmed: bool = False
    ) -> Optional[DispatchResult]:
        """Resolve a key combination and execute the winner. None if nothing is bound."""
        command = self.resolve(key_combination)
        if command is None:
            return None
        return self.execute(command, confirmed=confirmed)

    # Usage

    def recent_commands(self, limit: Optional[int] = None) -> List[Command]:
        """Recently executed commands that are still registered and available."""
        limit = self.config.max_recent_commands if limit is None else limit
        commands = []
        for command_id in self.usage.recent(len(self.usage)):
            if len(commands) >= limit:
                break
            command = self.registry.get(command_id)
            if command is not None and is_available(command, self._logger):
                commands.append(command)
        return commands

    def favorite_commands(self) -> List[Command]:
        commands = []
        for command_id in self.usage.favorites():
            command = self.registry.get(command_id)
            if command is not None and is_available(command, self._logger):
                commands.append(command)
        return commands

    def toggle_favorite(self, command_id: str) -> bool:
        """Flip a registered command's favorite flag. Returns the new value."""
        self.registry.get_by_id(command_id)
        return self.usage.toggle_favorite(command_id)


# Process-wide palette instance
_palette: Optional[CommandPalette] = None


def get_command_palette(config: Optional[PaletteConfig] = None) -> CommandPalette:
    """Get the global palette, creating it on first use."""
    global _palette
    if _palette is None:
        _palette = CommandPalette(config=config)
    return _palette


def reset_command_palette() -> None:
    """Drop the global palette (tests only)."""
    global _palette
    _palette = None
