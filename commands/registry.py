"""
Command Registry
----------------
Authoritative store of every invocable command, keyed by id.

Responsibilities:
- Validate commands at registration time (fail fast)
- Insert or replace by id, never duplicate
- Enumerate in registration order

Forbidden:
- Emitting notifications (palette visibility is the bus's job)
- Executing commands
"""

from dataclasses import replace
from itertools import count
from typing import Dict, Iterable, Iterator, List, Optional, Sequence
import logging
import threading

from core.errors import NotFoundError, ValidationError

from .keys import parse_shortcut
from .model import Command, CommandCategory, DangerLevel


def validate_command(command: Command) -> Command:
    """
    Validate a command and return its canonical form.

    The canonical form has a CommandCategory, a DangerLevel and,
    when present, a parsed Shortcut.
    """
    if not isinstance(command, Command):
        raise ValidationError(
            f"Expected a Command, got {type(command).__name__}", field="command"
        )

    command_id = command.id
    if not isinstance(command_id, str) or not command_id.strip():
        raise ValidationError("Command is missing an id", command_id=command_id, field="id")

    if command.execute is None or not callable(command.execute):
        raise ValidationError(
            f"Command {command_id} is missing a callable execute",
            command_id=command_id, field="execute",
        )

    if not isinstance(command.title, str):
        raise ValidationError(
            f"Command {command_id} has a non-string title",
            command_id=command_id, field="title",
        )

    try:
        category = CommandCategory(command.category)
    except ValueError:
        raise ValidationError(
            f"Command {command_id} uses unknown category: {command.category!r}",
            command_id=command_id, field="category",
        ) from None

    try:
        danger_level = DangerLevel(command.danger_level)
    except ValueError:
        raise ValidationError(
            f"Command {command_id} uses unknown danger level: {command.danger_level!r}",
            command_id=command_id, field="danger_level",
        ) from None

    shortcut = None
    if command.shortcut is not None:
        try:
            shortcut = parse_shortcut(command.shortcut)
        except ValueError as e:
            raise ValidationError(
                f"Command {command_id} has an invalid shortcut: {e}",
                command_id=command_id, field="shortcut",
            ) from e

    if command.is_available is not None and not callable(command.is_available):
        raise ValidationError(
            f"Command {command_id} has a non-callable availability predicate",
            command_id=command_id, field="is_available",
        )

    for keyword in command.keywords:
        if not isinstance(keyword, str):
            raise ValidationError(
                f"Command {command_id} has a non-string keyword: {keyword!r}",
                command_id=command_id, field="keywords",
            )

    return replace(command, category=category, danger_level=danger_level, shortcut=shortcut)


class CommandRegistry:
    """
    Registry for all palette commands.

    Iteration order is registration order. Replacing an existing id keeps
    its position; the registration stamp still advances so the shortcut
    resolver can tell which registration is the most recent.

    Mutations and snapshots are serialized with a re-entrant lock.
    """

    def __init__(self):
        self._commands: Dict[str, Command] = {}
        self._stamps: Dict[str, int] = {}
        self._sequence = count(1)
        self._lock = threading.RLock()
        self._logger = logging.getLogger("palette.commands.registry")

    def register(self, command: Command) -> None:
        """Insert or replace a command. Raises ValidationError on bad input."""
        canonical = validate_command(command)
        with self._lock:
            self._store(canonical)

    def register_many(self, commands: Iterable[Command]) -> None:
        """
        Register a batch atomically.

        Every command is validated before any is stored. If one fails,
        nothing is inserted and the ValidationError names its id.
        """
        batch: List[Command] = []
        for command in commands:
            try:
                batch.append(validate_command(command))
            except ValidationError as e:
                self._logger.warning(f"Batch rejected at {e.command_id!r}: {e.message}")
                raise

        with self._lock:
            for canonical in batch:
                self._store(canonical)

        self._logger.info(f"Registered batch of {len(batch)} commands")

    def _store(self, command: Command) -> None:
        if command.id in self._commands:
            self._logger.warning(f"Command {command.id} is already registered. Updating.")

        if command.shortcut is not None:
            for other in self._commands.values():
                if other.id != command.id and other.shortcut == command.shortcut:
                    self._logger.info(
                        f"Shortcut {command.shortcut} shared by {other.id} and {command.id}; "
                        f"{command.id} takes precedence",
                        extra={"command_id": command.id, "shortcut": str(command.shortcut)},
                    )

        self._commands[command.id] = command
        self._stamps[command.id] = next(self._sequence)
        self._logger.debug(
            f"Command registered: {command.title} ({command.id})",
            extra={"command_id": command.id},
        )

    def unregister(self, command_id: str) -> bool:
        """Remove a command. Returns True if it was registered."""
        with self._lock:
            if command_id in self._commands:
                del self._commands[command_id]
                del self._stamps[command_id]
                self._logger.debug(f"Command unregistered: {command_id}")
                return True
        return False

    def get(self, command_id: str) -> Optional[Command]:
        """Get a command by id, or None."""
        with self._lock:
            return self._commands.get(command_id)

    def get_by_id(self, command_id: str) -> Command:
        """Get a command by id. Raises NotFoundError if unknown."""
        command = self.get(command_id)
        if command is None:
            raise NotFoundError(command_id)
        return command

    def get_all(self) -> List[Command]:
        """Snapshot of all commands in registration order."""
        with self._lock:
            return list(self._commands.values())

    def by_category(self, category: CommandCategory) -> List[Command]:
        """Commands of one category, in registration order."""
        category = CommandCategory(category)
        return [c for c in self.get_all() if c.category == category]

    def registration_stamp(self, command_id: str) -> int:
        """Sequence number of the latest registration of `command_id`."""
        with self._lock:
            if command_id not in self._stamps:
                raise NotFoundError(command_id)
            return self._stamps[command_id]

    def snapshot(self) -> Sequence[tuple]:
        """Consistent (command, stamp) pairs in registration order."""
        with self._lock:
            return [(c, self._stamps[c.id]) for c in self._commands.values()]

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, command_id: str) -> bool:
        return command_id in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(self.get_all())


# Process-wide registry instance
_registry: Optional[CommandRegistry] = None


def get_command_registry() -> CommandRegistry:
    """Get the global command registry instance."""
    global _registry
    if _registry is None:
        _registry = CommandRegistry()
    return _registry


def reset_command_registry() -> None:
    """Drop the global registry (tests only)."""
    global _registry
    _registry = None
