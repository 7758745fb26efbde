"""
Abstract base component for terminal widgets.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from formkit.tui.keys import Key


class Component(ABC):
    """
    Base class for terminal widgets.

    Subclasses implement :meth:`render`, returning a list of pre-styled
    text lines.  Components track *dirty* state so a host can skip
    re-drawing widgets whose state has not changed.
    """

    def __init__(self) -> None:
        self._dirty: bool = True
        self._focused: bool = False

    @abstractmethod
    def render(self, width: int) -> list[str]:
        """
        Render the component into a list of text lines.

        Parameters
        ----------
        width:
            The available horizontal space in columns.
        """
        ...

    def handle_input(self, key: Key) -> bool:
        """
        Handle a keyboard event.

        Returns ``True`` if the event was consumed and should not propagate.
        """
        return False

    # ------------------------------------------------------------------
    # State management
    # ------------------------------------------------------------------

    def invalidate(self) -> None:
        """Mark the component as needing a re-render."""
        self._dirty = True

    @property
    def dirty(self) -> bool:
        return self._dirty

    @dirty.setter
    def dirty(self, value: bool) -> None:
        self._dirty = value

    @property
    def focused(self) -> bool:
        """Whether the component currently has input focus."""
        return self._focused

    @focused.setter
    def focused(self, value: bool) -> None:
        if self._focused != value:
            self._focused = value
            self._dirty = True
            self.on_focus_change(value)

    def on_focus_change(self, focused: bool) -> None:
        """Hook called after the focus flag flips."""
