"""
Key model for widget input.

Terminal bytes and host-toolkit key events are both reduced to a
``Key`` before they reach a widget, so widgets never see raw input.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Key data model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Key:
    """
    Parsed representation of a single key press.

    Attributes
    ----------
    name:
        Symbolic name for special keys (e.g. ``'enter'``, ``'down'``).
        For plain printable characters this equals *char*.
    char:
        The literal character, if printable.  Empty string otherwise.
    ctrl:
        ``True`` when Ctrl was held.
    alt:
        ``True`` when Alt (Meta/Option) was held.
    shift:
        ``True`` when Shift was held.
    """

    name: str
    char: str = ""
    ctrl: bool = False
    alt: bool = False
    shift: bool = False

    @property
    def is_printable(self) -> bool:
        """``True`` for an unmodified printable character."""
        return bool(self.char) and self.char.isprintable() and not self.ctrl and not self.alt

    @classmethod
    def from_name(cls, name: str) -> Key:
        """
        Build a key from a descriptor such as ``"down"``, ``"ctrl+u"`` or
        ``"a"``.  Browser-style names (``"ArrowDown"``) are accepted too.
        """
        parts = [p.strip() or p for p in name.split("+")]
        base = _DOM_NAMES.get(parts[-1], parts[-1].lower() if len(parts[-1]) > 1 else parts[-1])
        mods = {p.lower() for p in parts[:-1]}
        named = _NAMED.get(base)
        if named is not None and not mods:
            return named
        char = base if len(base) == 1 else ""
        if "ctrl" in mods:
            return Key(name=f"ctrl+{base}", char=char, ctrl=True, alt="alt" in mods)
        if "alt" in mods:
            return Key(name=f"alt+{base}", char=char, alt=True)
        if base == "space":
            char = " "
        return Key(name=base, char=char, shift="shift" in mods)


# ---------------------------------------------------------------------------
# Common key constants
# ---------------------------------------------------------------------------

KEY_ENTER = Key(name="enter", char="\r")
KEY_TAB = Key(name="tab", char="\t")
KEY_ESCAPE = Key(name="escape")
KEY_BACKSPACE = Key(name="backspace")
KEY_DELETE = Key(name="delete")

KEY_UP = Key(name="up")
KEY_DOWN = Key(name="down")
KEY_LEFT = Key(name="left")
KEY_RIGHT = Key(name="right")

KEY_HOME = Key(name="home")
KEY_END = Key(name="end")

KEY_SPACE = Key(name="space", char=" ")

_NAMED: dict[str, Key] = {
    k.name: k
    for k in (
        KEY_ENTER, KEY_TAB, KEY_ESCAPE, KEY_BACKSPACE, KEY_DELETE,
        KEY_UP, KEY_DOWN, KEY_LEFT, KEY_RIGHT, KEY_HOME, KEY_END, KEY_SPACE,
    )
}

# KeyboardEvent.key values used by browser front-ends
_DOM_NAMES: dict[str, str] = {
    "ArrowDown": "down",
    "ArrowUp": "up",
    "ArrowLeft": "left",
    "ArrowRight": "right",
    "Enter": "enter",
    "Escape": "escape",
    "Esc": "escape",
    "Tab": "tab",
    "Backspace": "backspace",
    "Delete": "delete",
    "Home": "home",
    "End": "end",
    " ": "space",
}


# ---------------------------------------------------------------------------
# Terminal byte parsing
# ---------------------------------------------------------------------------

_CSI_SIMPLE: dict[bytes, Key] = {
    b"A": KEY_UP,
    b"B": KEY_DOWN,
    b"C": KEY_RIGHT,
    b"D": KEY_LEFT,
    b"H": KEY_HOME,
    b"F": KEY_END,
    b"Z": Key(name="tab", char="\t", shift=True),  # Shift+Tab
}


def parse_key(data: bytes) -> Key:
    """
    Parse raw terminal input bytes into a ``Key`` object.

    Only the sequences a list-style widget needs are recognised: arrows,
    home/end, delete, enter, tab, backspace, escape, Ctrl+letter and
    printable UTF-8 characters.  Anything else becomes ``Key("unknown")``.
    """
    if not data:
        return Key(name="unknown")

    if data[0:1] == b"\x1b":
        if len(data) == 1:
            return KEY_ESCAPE
        if data[1:2] == b"[":
            tail = data[2:]
            if tail in _CSI_SIMPLE:
                return _CSI_SIMPLE[tail]
            if tail == b"3~":
                return KEY_DELETE
        return Key(name="unknown")

    byte = data[0]

    if byte in (0x0d, 0x0a):
        return KEY_ENTER
    if byte == 0x09:
        return KEY_TAB
    if byte in (0x7f, 0x08):
        return KEY_BACKSPACE
    if 1 <= byte <= 26:
        letter = chr(byte + 96)  # 1 -> 'a'
        return Key(name=f"ctrl+{letter}", char=letter, ctrl=True)

    try:
        ch = data.decode("utf-8")
    except UnicodeDecodeError:
        return Key(name="unknown")

    if len(ch) == 1 and ch.isprintable():
        if ch == " ":
            return KEY_SPACE
        return Key(name=ch, char=ch)

    return Key(name="unknown")
