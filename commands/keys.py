"""
Key Combinations
----------------
Canonical representation of keyboard shortcuts.

Two spellings of the same physical combination always compare equal:
- Modifier order does not matter ("Shift+Ctrl+S" == "Ctrl+Shift+S")
- Case does not matter ("ctrl+s" == "Ctrl+S")
- Platform aliases fold together (Cmd/Meta -> Ctrl, Option -> Alt)

Canonical text lists modifiers as Ctrl, Alt, Shift and then the key.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple, Union
import re


MODIFIER_ORDER: Tuple[str, ...] = ("Ctrl", "Alt", "Shift")

MODIFIER_ALIASES = {
    "ctrl": "Ctrl",
    "control": "Ctrl",
    "cmd": "Ctrl",
    "command": "Ctrl",
    "meta": "Ctrl",
    "mod": "Ctrl",
    "alt": "Alt",
    "option": "Alt",
    "opt": "Alt",
    "shift": "Shift",
}

NAMED_KEYS = {
    "enter": "Enter",
    "return": "Enter",
    "escape": "Escape",
    "esc": "Escape",
    "space": "Space",
    "spacebar": "Space",
    "tab": "Tab",
    "backspace": "Backspace",
    "delete": "Delete",
    "del": "Delete",
    "insert": "Insert",
    "ins": "Insert",
    "home": "Home",
    "end": "End",
    "pageup": "PageUp",
    "pgup": "PageUp",
    "pagedown": "PageDown",
    "pgdn": "PageDown",
    "up": "Up",
    "arrowup": "Up",
    "down": "Down",
    "arrowdown": "Down",
    "left": "Left",
    "arrowleft": "Left",
    "right": "Right",
    "arrowright": "Right",
    "plus": "+",
    "minus": "-",
}

_FUNCTION_KEY = re.compile(r"^f([1-9]|1[0-9]|2[0-4])$")


@dataclass(frozen=True)
class Shortcut:
    """A canonical key combination: a set of modifiers plus one key."""
    key: str
    modifiers: FrozenSet[str] = frozenset()

    @property
    def parts(self) -> Tuple[str, ...]:
        ordered = tuple(m for m in MODIFIER_ORDER if m in self.modifiers)
        return ordered + (self.key,)

    def __str__(self) -> str:
        return "+".join(self.parts)

    def __repr__(self) -> str:
        return f"Shortcut({self})"


def normalize_key(key: str) -> str:
    """Return the canonical spelling of a single non-modifier key."""
    if key == " ":
        return "Space"

    key = key.strip()
    if not key:
        raise ValueError("Empty key name")

    lowered = key.lower()
    if lowered in NAMED_KEYS:
        return NAMED_KEYS[lowered]
    if _FUNCTION_KEY.match(lowered):
        return lowered.upper()
    if len(key) == 1:
        return key.upper()

    return key[0].upper() + key[1:].lower()


def normalize_modifier(name: str) -> str:
    """Return the canonical modifier for an alias. Raises ValueError if unknown."""
    modifier = MODIFIER_ALIASES.get(str(name).strip().lower())
    if modifier is None:
        raise ValueError(f"Unknown modifier: {name!r}")
    return modifier


def _split(text: str) -> list:
    if text == "+":
        return ["+"]
    if text.endswith("++"):
        return text[:-2].split("+") + ["+"]
    return text.split("+")


def parse_shortcut(value: Union[str, Shortcut]) -> Shortcut:
    """
    Parse a key combination into its canonical form.

    Raises ValueError for empty input, a combination without a key,
    or a combination naming more than one key.
    """
    if isinstance(value, Shortcut):
        if not isinstance(value.key, str):
            raise ValueError(f"Shortcut key must be a string, got {type(value.key).__name__}")
        if MODIFIER_ALIASES.get(value.key.strip().lower()) is not None:
            raise ValueError(f"Shortcut has no key: {value.key!r} is a modifier")
        return Shortcut(
            key=normalize_key(value.key),
            modifiers=frozenset(normalize_modifier(m) for m in value.modifiers),
        )
    if not isinstance(value, str):
        raise ValueError(f"Shortcut must be a string, got {type(value).__name__}")

    text = value.strip()
    if not text:
        raise ValueError("Empty shortcut")

    modifiers = set()
    key: Optional[str] = None

    for raw in _split(text):
        part = raw.strip()
        if not part:
            raise ValueError(f"Malformed shortcut: {value!r}")

        modifier = MODIFIER_ALIASES.get(part.lower())
        if modifier is not None:
            modifiers.add(modifier)
            continue

        if key is not None:
            raise ValueError(f"Shortcut names more than one key: {value!r}")
        key = normalize_key(part)

    if key is None:
        raise ValueError(f"Shortcut has no key: {value!r}")

    return Shortcut(key=key, modifiers=frozenset(modifiers))


def normalize_shortcut(value: Union[str, Shortcut]) -> str:
    """Canonical text for a key combination, e.g. 'shift+ctrl+s' -> 'Ctrl+Shift+S'."""
    return str(parse_shortcut(value))


def shortcut_from_event(
    key: str,
    ctrl: bool = False,
    alt: bool = False,
    shift: bool = False,
    meta: bool = False,
) -> Shortcut:
    """Build a Shortcut from the fields of a raw key event."""
    modifiers = set()
    if ctrl or meta:
        modifiers.add("Ctrl")
    if alt:
        modifiers.add("Alt")
    if shift:
        modifiers.add("Shift")

    return Shortcut(key=normalize_key(key), modifiers=frozenset(modifiers))
