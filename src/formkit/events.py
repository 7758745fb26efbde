"""
UI event bus.

Widgets that react to input happening *outside* of themselves (a pointer
press elsewhere on screen closes an open dropdown) subscribe here instead
of installing global listeners.  Each subscription is owned by the
component that made it and is released by calling the returned
unsubscribe function.

Example:
    from formkit.events import POINTER_DOWN, PointerEvent, UIEventBus

    bus = UIEventBus()
    unsubscribe = bus.on(POINTER_DOWN, lambda e: print(e.target), source="fruit")
    bus.emit(POINTER_DOWN, PointerEvent(target="other-widget"))
    unsubscribe()
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from formkit.logging import get_logger

logger = get_logger("events")

# Event name constants
POINTER_DOWN = "pointer_down"
FOCUS_CHANGE = "focus_change"


@dataclass(frozen=True)
class PointerEvent:
    """A pointer press; *target* is the id of the component hit, if any."""

    target: str | None = None


@dataclass(frozen=True)
class FocusChangeEvent:
    """Keyboard focus moved to *target* (``None`` when focus left the form)."""

    target: str | None = None


EventHandler = Callable[[Any], Any]


@dataclass
class _HandlerEntry:
    event: str
    handler: EventHandler
    source: str


class UIEventBus:
    """
    Synchronous publish/subscribe hub for UI events.

    Handlers run in subscription order.  A handler that raises is logged
    and skipped so one broken widget cannot stop delivery to the others.
    """

    def __init__(self) -> None:
        self._handlers: list[_HandlerEntry] = []

    def on(self, event: str, handler: EventHandler, source: str = "") -> Callable[[], None]:
        """Register *handler* for *event* and return an unsubscribe function."""
        entry = _HandlerEntry(event=event, handler=handler, source=source)
        self._handlers.append(entry)

        def unsubscribe() -> None:
            try:
                self._handlers.remove(entry)
            except ValueError:
                pass

        return unsubscribe

    def emit(self, event: str, data: Any = None) -> int:
        """Deliver *data* to every handler of *event*. Returns handlers called."""
        # Snapshot: handlers may unsubscribe while being delivered to
        relevant = [h for h in self._handlers if h.event == event]
        for entry in relevant:
            try:
                entry.handler(data)
            except Exception as e:
                logger.warning(
                    "UI event handler error (event=%s, source=%s): %s",
                    event,
                    entry.source,
                    e,
                )
        return len(relevant)

