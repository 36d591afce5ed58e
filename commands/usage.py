"""
Command Usage
-------------
In-memory usage statistics: counts, recency and favorites.

Recency is ordered by an internal sequence number rather than the wall
clock, so two executions in the same instant still have a defined order.
Usage never changes search ranking.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from itertools import count
from typing import Dict, List, Optional


@dataclass
class CommandUsage:
    """Usage statistics for one command."""
    command_id: str
    usage_count: int = 0
    last_used: Optional[datetime] = None
    favorite: bool = False
    sequence: int = field(default=0, repr=False)


class UsageTracker:
    """Tracks which commands were executed, and how often."""

    def __init__(self):
        self._usage: Dict[str, CommandUsage] = {}
        self._sequence = count(1)

    def _entry(self, command_id: str) -> CommandUsage:
        usage = self._usage.get(command_id)
        if usage is None:
            usage = CommandUsage(command_id=command_id)
            self._usage[command_id] = usage
        return usage

    def record(self, command_id: str) -> CommandUsage:
        """Record one successful execution."""
        usage = self._entry(command_id)
        usage.usage_count += 1
        usage.last_used = datetime.now(timezone.utc)
        usage.sequence = next(self._sequence)
        return usage

    def get(self, command_id: str) -> Optional[CommandUsage]:
        return self._usage.get(command_id)

    def recent(self, limit: int = 10) -> List[str]:
        """Ids of used commands, most recent first."""
        used = [u for u in self._usage.values() if u.usage_count > 0]
        used.sort(key=lambda u: u.sequence, reverse=True)
        return [u.command_id for u in used[:limit]]

    def favorites(self) -> List[str]:
        """Ids marked as favorite, in the order they were first tracked."""
        return [u.command_id for u in self._usage.values() if u.favorite]

    def toggle_favorite(self, command_id: str) -> bool:
        """Flip the favorite flag. Returns the new value."""
        usage = self._entry(command_id)
        usage.favorite = not usage.favorite
        return usage.favorite

    def forget(self, command_id: str) -> bool:
        """Drop all statistics for a command. Returns True if any existed."""
        return self._usage.pop(command_id, None) is not None

    def clear(self) -> None:
        """Clear all usage statistics."""
        self._usage.clear()

    def __len__(self) -> int:
        return len(self._usage)
