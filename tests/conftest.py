"""
Palette Test Configuration
--------------------------
Shared fixtures and configuration for all tests.
"""

import sys
from pathlib import Path
from typing import Callable, List

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from commands.model import Command, CommandCategory
from commands.registry import CommandRegistry, reset_command_registry
from core.palette import CommandPalette, reset_command_palette
from core.visibility_bus import VisibilityBus, reset_visibility_bus
from infra.config import PaletteConfig


# =============================================================================
# Test Isolation: process-wide singletons
# =============================================================================

@pytest.fixture(autouse=True)
def reset_singletons():
    """
    Drop the global registry, bus and palette around every test.

    Tests that touch get_command_registry() and friends always start
    from empty process-wide state.
    """
    reset_command_registry()
    reset_visibility_bus()
    reset_command_palette()
    yield
    reset_command_registry()
    reset_visibility_bus()
    reset_command_palette()


@pytest.fixture(autouse=True)
def clean_palette_env(monkeypatch):
    """Keep PALETTE_* variables from the developer's shell out of tests."""
    import os

    for name in list(os.environ):
        if name.startswith("PALETTE_"):
            monkeypatch.delenv(name, raising=False)


class CallLog:
    """Records which command callbacks ran, in order."""

    def __init__(self):
        self.calls: List[str] = []

    def action(self, name: str) -> Callable[[], None]:
        def _run() -> None:
            self.calls.append(name)
        return _run

    def count(self, name: str) -> int:
        return self.calls.count(name)


@pytest.fixture
def calls() -> CallLog:
    return CallLog()


@pytest.fixture
def make_command(calls):
    """
    Build a Command with sensible defaults.

    The execute callback records the command id in the `calls` log.
    """
    def _make(command_id: str, title: str = "", **kwargs) -> Command:
        kwargs.setdefault("category", CommandCategory.FILE)
        kwargs.setdefault("execute", calls.action(command_id))
        return Command(id=command_id, title=title or command_id, **kwargs)
    return _make


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry()


@pytest.fixture
def bus() -> VisibilityBus:
    return VisibilityBus()


@pytest.fixture
def palette(registry, bus) -> CommandPalette:
    return CommandPalette(registry=registry, bus=bus, config=PaletteConfig())


@pytest.fixture
def save_commands(make_command):
    """The Save File / Save As pair used across scenarios."""
    return [
        make_command("file.save", "Save File", shortcut="Ctrl+S"),
        make_command("file.saveAs", "Save As", shortcut="Ctrl+Shift+S"),
    ]
