"""
Shortcut Resolver
-----------------
Maps a key combination to at most one available command.

Conflict rule: when several available commands share a canonical
shortcut, the most recently registered one wins. Feature modules load
in sequence and a later registration is the more specific context.
Re-registering a command makes it the most recent again.

The resolver never executes anything; dispatch is a separate step.
"""

from typing import Dict, List, Mapping, Optional, Tuple, Union
import logging

from core.errors import ValidationError

from .keys import Shortcut, parse_shortcut
from .model import Command, is_available
from .registry import CommandRegistry


class ShortcutResolver:
    """
    Resolve key combinations against a registry.

    `overrides` rebinds shortcuts by command id; a value of None (or an
    empty string) unbinds the command.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        overrides: Optional[Mapping[str, Optional[str]]] = None,
        enabled: bool = True,
    ):
        self._registry = registry
        self._overrides: Dict[str, Optional[Shortcut]] = {}
        self._enabled = enabled
        self._logger = logging.getLogger("palette.commands.shortcuts")

        for command_id, value in (overrides or {}).items():
            self.set_override(command_id, value)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable shortcut resolution."""
        self._enabled = enabled
        self._logger.info(f"Shortcuts {'enabled' if enabled else 'disabled'}")

    def set_override(self, command_id: str, value: Optional[Union[str, Shortcut]]) -> None:
        """Rebind (or unbind with None/'') the shortcut of a command id."""
        if value is None or value == "":
            self._overrides[command_id] = None
            return
        try:
            self._overrides[command_id] = parse_shortcut(value)
        except ValueError as e:
            raise ValidationError(
                f"Invalid shortcut override for {command_id}: {e}",
                command_id=command_id, field="shortcut",
            ) from e

    def clear_override(self, command_id: str) -> None:
        self._overrides.pop(command_id, None)

    def effective_shortcut(self, command: Command) -> Optional[Shortcut]:
        """The shortcut a command answers to, after overrides."""
        if command.id in self._overrides:
            return self._overrides[command.id]
        return command.shortcut

    def _bound(self, available_only: bool = True) -> List[Tuple[Shortcut, int, Command]]:
        bound = []
        for command, stamp in self._registry.snapshot():
            shortcut = self.effective_shortcut(command)
            if shortcut is None:
                continue
            if available_only and not is_available(command, self._logger):
                continue
            bound.append((shortcut, stamp, command))
        return bound

    def resolve(self, key_combination: Union[str, Shortcut]) -> Optional[Command]:
        """
        Find the command bound to a key combination.

        Returns None when resolution is disabled, the input cannot be
        parsed, or no available command is bound to it.
        """
        if not self._enabled:
            return None

        try:
            wanted = parse_shortcut(key_combination)
        except ValueError:
            self._logger.debug(f"Ignoring unparseable key combination: {key_combination!r}")
            return None

        winner: Optional[Command] = None
        winner_stamp = -1
        for shortcut, stamp, command in self._bound():
            if shortcut == wanted and stamp > winner_stamp:
                winner, winner_stamp = command, stamp

        return winner

    def find_conflicts(self) -> Dict[str, List[Command]]:
        """Canonical shortcut -> commands sharing it, oldest registration first."""
        buckets: Dict[str, List[Tuple[int, Command]]] = {}
        for shortcut, stamp, command in self._bound(available_only=False):
            buckets.setdefault(str(shortcut), []).append((stamp, command))

        return {
            key: [command for _, command in sorted(entries, key=lambda e: e[0])]
            for key, entries in buckets.items()
            if len(entries) > 1
        }

    def bindings(self) -> List[Tuple[str, Command]]:
        """Winning (shortcut, command) per canonical shortcut, in registration order."""
        winners: Dict[Shortcut, Tuple[int, Command]] = {}
        for shortcut, stamp, command in self._bound():
            current = winners.get(shortcut)
            if current is None or stamp > current[0]:
                winners[shortcut] = (stamp, command)

        ordered = sorted(winners.items(), key=lambda item: item[1][0])
        return [(str(shortcut), command) for shortcut, (_, command) in ordered]
