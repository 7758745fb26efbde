"""
Terminal widget primitives: key model, keybindings, component base and
ANSI styling.
"""
from __future__ import annotations

from formkit.tui.component import Component
from formkit.tui.keybindings import DEFAULT_KEYBINDINGS, KeybindingsManager
from formkit.tui.keys import Key, parse_key

__all__ = [
    "Component",
    "Key",
    "parse_key",
    "KeybindingsManager",
    "DEFAULT_KEYBINDINGS",
]
