"""
Shortcut Resolver Tests
-----------------------
Tests for key combination resolution.

Tests cover:
- Exact canonical matching
- Last-registration-wins conflicts
- Availability filtering
- Overrides and disabling
"""

import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from commands.keys import Shortcut, shortcut_from_event
from commands.shortcuts import ShortcutResolver
from core.errors import ValidationError


@pytest.fixture
def resolver(registry):
    return ShortcutResolver(registry)


class TestResolution:
    """Exact canonical matches only."""

    def test_ctrl_s_resolves_save(self, registry, resolver, save_commands):
        registry.register_many(save_commands)
        assert resolver.resolve("Ctrl+S").id == "file.save"

    def test_extra_modifier_is_a_different_combination(self, registry, resolver, save_commands):
        registry.register_many(save_commands)
        assert resolver.resolve("ctrl+shift+s").id == "file.saveAs"

    def test_spelling_variants(self, registry, resolver, save_commands):
        registry.register_many(save_commands)
        assert resolver.resolve("Shift+Ctrl+S").id == "file.saveAs"
        assert resolver.resolve("cmd+s").id == "file.save"

    def test_event_shortcut(self, registry, resolver, save_commands):
        registry.register_many(save_commands)
        assert resolver.resolve(shortcut_from_event("s", ctrl=True)).id == "file.save"

    def test_lowercase_shortcut_instance_resolves(self, registry, resolver, make_command):
        registry.register(make_command(
            "file.save", "Save", shortcut=Shortcut(key="s", modifiers=frozenset({"ctrl"}))
        ))

        assert registry.get("file.save").shortcut_text == "Ctrl+S"
        assert resolver.resolve("Ctrl+S").id == "file.save"

    def test_unknown_modifier_rejected_at_registration(self, registry, make_command):
        with pytest.raises(ValidationError):
            registry.register(make_command(
                "a", shortcut=Shortcut(key="s", modifiers=frozenset({"Hyper"}))
            ))

    def test_unbound_combination(self, registry, resolver, save_commands):
        registry.register_many(save_commands)
        assert resolver.resolve("Ctrl+Q") is None

    def test_unparseable_input_returns_none(self, registry, resolver, save_commands):
        registry.register_many(save_commands)
        assert resolver.resolve("Ctrl+") is None
        assert resolver.resolve("") is None

    def test_resolve_never_executes(self, registry, resolver, save_commands, calls):
        registry.register_many(save_commands)
        resolver.resolve("Ctrl+S")
        assert calls.calls == []


class TestConflicts:
    """Most recent registration wins."""

    def test_last_registration_wins(self, registry, resolver, make_command):
        registry.register(make_command("a", shortcut="Ctrl+K"))
        registry.register(make_command("b", shortcut="Ctrl+K"))

        assert resolver.resolve("Ctrl+K").id == "b"

    def test_reregistering_takes_precedence_again(self, registry, resolver, make_command):
        registry.register(make_command("a", shortcut="Ctrl+K"))
        registry.register(make_command("b", shortcut="Ctrl+K"))
        registry.register(make_command("a", shortcut="Ctrl+K"))

        assert resolver.resolve("Ctrl+K").id == "a"

    def test_unregister_restores_earlier(self, registry, resolver, make_command):
        registry.register(make_command("a", shortcut="Ctrl+K"))
        registry.register(make_command("b", shortcut="Ctrl+K"))
        registry.unregister("b")

        assert resolver.resolve("Ctrl+K").id == "a"

    def test_unavailable_winner_falls_back(self, registry, resolver, make_command):
        registry.register(make_command("a", shortcut="Ctrl+K"))
        registry.register(make_command("b", shortcut="Ctrl+K", is_available=lambda: False))

        assert resolver.resolve("Ctrl+K").id == "a"

    def test_all_unavailable(self, registry, resolver, make_command):
        registry.register(make_command("a", shortcut="Ctrl+K", is_available=lambda: False))
        assert resolver.resolve("Ctrl+K") is None

    def test_raising_predicate_is_unavailable(self, registry, resolver, make_command):
        def broken():
            raise RuntimeError("boom")

        registry.register(make_command("a", shortcut="Ctrl+K", is_available=broken))
        assert resolver.resolve("Ctrl+K") is None

    def test_find_conflicts(self, registry, resolver, make_command):
        registry.register(make_command("a", shortcut="Ctrl+K"))
        registry.register(make_command("b", shortcut="ctrl+k", is_available=lambda: False))
        registry.register(make_command("c", shortcut="Ctrl+J"))

        conflicts = resolver.find_conflicts()

        assert list(conflicts) == ["Ctrl+K"]
        assert [c.id for c in conflicts["Ctrl+K"]] == ["a", "b"]

    def test_bindings(self, registry, resolver, make_command):
        registry.register(make_command("a", shortcut="Ctrl+K"))
        registry.register(make_command("b", shortcut="Ctrl+J"))
        registry.register(make_command("c", shortcut="Ctrl+K"))
        registry.register(make_command("d"))

        assert [(key, c.id) for key, c in resolver.bindings()] == [
            ("Ctrl+J", "b"), ("Ctrl+K", "c"),
        ]


class TestOverrides:
    """User rebinding by command id."""

    def test_override_rebinds(self, registry, save_commands):
        registry.register_many(save_commands)
        resolver = ShortcutResolver(registry, overrides={"file.save": "Alt+S"})

        assert resolver.resolve("Alt+S").id == "file.save"
        assert resolver.resolve("Ctrl+S") is None

    def test_override_unbinds(self, registry, save_commands):
        registry.register_many(save_commands)
        resolver = ShortcutResolver(registry, overrides={"file.save": None})

        assert resolver.resolve("Ctrl+S") is None
        assert resolver.effective_shortcut(registry.get("file.save")) is None

    def test_clear_override(self, registry, resolver, save_commands):
        registry.register_many(save_commands)
        resolver.set_override("file.save", "")
        resolver.clear_override("file.save")

        assert resolver.resolve("Ctrl+S").id == "file.save"

    def test_invalid_override(self, registry):
        with pytest.raises(ValidationError) as exc_info:
            ShortcutResolver(registry, overrides={"file.save": "Ctrl+Shift"})
        assert exc_info.value.command_id == "file.save"


class TestEnabled:
    """Resolution can be switched off."""

    def test_disabled_resolves_nothing(self, registry, save_commands):
        registry.register_many(save_commands)
        resolver = ShortcutResolver(registry, enabled=False)

        assert resolver.enabled is False
        assert resolver.resolve("Ctrl+S") is None

    def test_toggle_enabled(self, registry, resolver, save_commands):
        registry.register_many(save_commands)
        resolver.set_enabled(False)
        assert resolver.resolve("Ctrl+S") is None
        resolver.set_enabled(True)
        assert resolver.resolve("Ctrl+S").id == "file.save"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
