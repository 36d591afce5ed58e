"""
Key Combination Tests
---------------------
Tests for shortcut canonicalisation.

Tests cover:
- Modifier order and case independence
- Platform aliases
- Named and function keys
- Malformed input
"""

import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from commands.keys import (
    Shortcut, parse_shortcut, normalize_shortcut, shortcut_from_event, normalize_key
)


class TestCanonicalForm:
    """Equivalent spellings compare equal."""

    def test_modifier_order_does_not_matter(self):
        assert parse_shortcut("Shift+Ctrl+S") == parse_shortcut("Ctrl+Shift+S")

    def test_case_does_not_matter(self):
        assert parse_shortcut("ctrl+shift+s") == parse_shortcut("CTRL+SHIFT+S")

    def test_canonical_text(self):
        assert normalize_shortcut("shift+alt+ctrl+p") == "Ctrl+Alt+Shift+P"

    def test_whitespace_around_parts(self):
        assert normalize_shortcut(" ctrl + s ") == "Ctrl+S"

    def test_platform_aliases_fold_to_ctrl(self):
        assert normalize_shortcut("Cmd+S") == "Ctrl+S"
        assert normalize_shortcut("Meta+S") == "Ctrl+S"
        assert normalize_shortcut("Option+X") == "Alt+X"

    def test_canonical_shortcut_instance(self):
        shortcut = Shortcut(key="S", modifiers=frozenset({"Ctrl"}))
        assert parse_shortcut(shortcut) == shortcut

    def test_shortcut_instance_is_normalized(self):
        lowered = Shortcut(key="s", modifiers=frozenset({"ctrl"}))
        aliased = Shortcut(key="s", modifiers=frozenset({"Cmd", "option"}))

        assert parse_shortcut(lowered) == parse_shortcut("Ctrl+S")
        assert str(parse_shortcut(lowered)) == "Ctrl+S"
        assert parse_shortcut(aliased) == parse_shortcut("Ctrl+Alt+S")

    def test_shortcut_instance_unknown_modifier(self):
        with pytest.raises(ValueError):
            parse_shortcut(Shortcut(key="s", modifiers=frozenset({"Hyper"})))

    def test_shortcut_instance_modifier_as_key(self):
        with pytest.raises(ValueError):
            parse_shortcut(Shortcut(key="ctrl"))

    def test_str_and_parts(self):
        shortcut = parse_shortcut("shift+ctrl+s")
        assert shortcut.parts == ("Ctrl", "Shift", "S")
        assert str(shortcut) == "Ctrl+Shift+S"


class TestNamedKeys:
    """Named keys have one spelling."""

    def test_enter_aliases(self):
        assert normalize_shortcut("ctrl+return") == "Ctrl+Enter"
        assert normalize_shortcut("Ctrl+ENTER") == "Ctrl+Enter"

    def test_escape_alias(self):
        assert normalize_shortcut("esc") == "Escape"

    def test_arrow_keys(self):
        assert normalize_key("ArrowUp") == "Up"
        assert normalize_key("arrowleft") == "Left"

    def test_function_keys(self):
        assert normalize_shortcut("f11") == "F11"
        assert normalize_shortcut("Shift+F5") == "Shift+F5"

    def test_plus_key(self):
        shortcut = parse_shortcut("Ctrl++")
        assert shortcut.key == "+"
        assert shortcut.modifiers == frozenset({"Ctrl"})
        assert parse_shortcut("ctrl+plus") == shortcut

    def test_minus_and_digits(self):
        assert normalize_shortcut("Ctrl+-") == "Ctrl+-"
        assert normalize_shortcut("ctrl+0") == "Ctrl+0"

    def test_single_key_without_modifiers(self):
        assert normalize_shortcut("?") == "?"
        assert normalize_shortcut("+") == "+"


class TestMalformed:
    """Malformed combinations raise ValueError."""

    @pytest.mark.parametrize("text", ["", "   ", "Ctrl+", "Ctrl+Shift", "A+B", "Ctrl++S"])
    def test_rejected(self, text):
        with pytest.raises(ValueError):
            parse_shortcut(text)

    def test_non_string_rejected(self):
        with pytest.raises(ValueError):
            parse_shortcut(42)


class TestFromEvent:
    """Raw key events map onto the same canonical form."""

    def test_ctrl_s(self):
        assert shortcut_from_event("s", ctrl=True) == parse_shortcut("Ctrl+S")

    def test_meta_is_ctrl(self):
        assert shortcut_from_event("s", meta=True) == parse_shortcut("Ctrl+S")

    def test_all_modifiers(self):
        event = shortcut_from_event("p", ctrl=True, alt=True, shift=True)
        assert str(event) == "Ctrl+Alt+Shift+P"

    def test_space_key(self):
        assert str(shortcut_from_event(" ", ctrl=True)) == "Ctrl+Space"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
