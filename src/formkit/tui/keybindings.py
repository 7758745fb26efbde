"""
Keybinding management.

Maps logical combobox actions to key descriptors and supports user
overrides loaded from a JSON configuration file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from formkit.logging import get_logger
from formkit.tui.keys import Key

logger = get_logger("tui.keybindings")

# ---------------------------------------------------------------------------
# Default keybinding map
# ---------------------------------------------------------------------------

MOVE_NEXT = "move_next"
MOVE_PREVIOUS = "move_previous"
CONFIRM = "confirm"
DISMISS = "dismiss"
BLUR = "blur"
ERASE = "erase"

DEFAULT_KEYBINDINGS: dict[str, list[str]] = {
    MOVE_NEXT: ["down"],
    MOVE_PREVIOUS: ["up"],
    CONFIRM: ["enter"],
    DISMISS: ["escape"],
    BLUR: ["tab", "shift+tab"],
    ERASE: ["backspace"],
}


def _normalise_key_descriptor(descriptor: str) -> str:
    """
    Normalise a human-readable key descriptor to a canonical form.

    ``"Shift+Tab"`` -> ``"shift+tab"``
    """
    parts = [p.strip().lower() for p in descriptor.split("+")]
    modifiers = sorted(parts[:-1])
    return "+".join(modifiers + [parts[-1]])


def _key_to_descriptor(key: Key) -> str:
    """
    Convert a parsed :class:`Key` into a canonical descriptor string.

    >>> _key_to_descriptor(Key(name="ctrl+u", char="u", ctrl=True))
    'ctrl+u'
    >>> _key_to_descriptor(Key(name="tab", shift=True))
    'shift+tab'
    """
    mods: list[str] = []
    if key.ctrl:
        mods.append("ctrl")
    if key.alt:
        mods.append("alt")
    if key.shift:
        mods.append("shift")

    # ``ctrl+u`` style names already carry the modifier; keep the base only
    base = key.name.rsplit("+", 1)[-1] if len(key.name) > 1 else key.name
    return "+".join(sorted(mods) + [base.lower()])


# ---------------------------------------------------------------------------
# Manager
# ---------------------------------------------------------------------------

class KeybindingsManager:
    """
    Manages the mapping from logical action names to key descriptors.

    Parameters
    ----------
    user_overrides:
        Optional mapping of action names to descriptor lists that replace
        the defaults for those actions.
    """

    def __init__(self, user_overrides: dict[str, list[str]] | None = None) -> None:
        self._bindings: dict[str, list[str]] = dict(DEFAULT_KEYBINDINGS)
        if user_overrides:
            self._bindings.update(user_overrides)

        self._normalised: dict[str, list[str]] = {
            action: [_normalise_key_descriptor(d) for d in descriptors]
            for action, descriptors in self._bindings.items()
        }

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> KeybindingsManager:
        """
        Load keybindings from a JSON file.

        When *config_path* is ``None`` the file ``~/.formkit/keybindings.json``
        is used if it exists.  The file maps action names to lists of key
        descriptors, e.g.::

            {"move_next": ["down", "ctrl+n"], "move_previous": ["up", "ctrl+p"]}
        """
        if config_path is not None:
            path = Path(config_path)
        else:
            path = Path.home() / ".formkit" / "keybindings.json"

        overrides: dict[str, list[str]] | None = None

        if path.is_file():
            try:
                raw: Any = json.loads(path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Ignoring unreadable keybindings file %s: %s", path, exc)
            else:
                if isinstance(raw, dict):
                    overrides = {
                        action: val
                        for action, val in raw.items()
                        if isinstance(val, list) and all(isinstance(v, str) for v in val)
                    }

        return cls(user_overrides=overrides)

    def matches(self, key: Key | str, action: str) -> bool:
        """Test whether *key* (a :class:`Key` or descriptor) is bound to *action*."""
        descriptors = self._normalised.get(action)
        if descriptors is None:
            return False

        if isinstance(key, str):
            normalised = _normalise_key_descriptor(key)
        else:
            normalised = _key_to_descriptor(key)

        return normalised in descriptors

    def get_keys(self, action: str) -> list[str]:
        """Return the descriptors bound to *action* in their original form."""
        return list(self._bindings.get(action, []))

    def actions(self) -> list[str]:
        """Return all registered action names."""
        return list(self._bindings.keys())

    def find_action(self, key: Key | str) -> str | None:
        """Find the first action (in insertion order) that matches *key*."""
        for action in self._bindings:
            if self.matches(key, action):
                return action
        return None
