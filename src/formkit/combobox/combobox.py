"""
Combobox controller.

Owns the option store, the immutable state record and the async loader,
and turns user intents (focus, typing, keys, clicks) into state
transitions.  Rendering is delegated to an attached :class:`ComboboxView`.

Example:
    from formkit.combobox import Combobox, ComboboxCallbacks, ComboboxConfig

    box = Combobox(
        ComboboxConfig(id="fruit", mode="multi", options=["Apple", "Banana"]),
        ComboboxCallbacks(on_change=lambda values, state: print(values)),
    )
    box.query_changed("ban")
    box.key_pressed("down")
    box.key_pressed("enter")   # prints ['Banana']
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol

from formkit.combobox import navigation, selection
from formkit.combobox.config import ComboboxCallbacks, ComboboxConfig
from formkit.combobox.filtering import display_order, filter_options, group_options
from formkit.combobox.loader import AsyncOptionLoader
from formkit.combobox.options import Option, OptionStore, OptionValue, option_key
from formkit.combobox.selection import MULTI, SINGLE
from formkit.combobox.state import ComboboxState
from formkit.events import FOCUS_CHANGE, POINTER_DOWN, UIEventBus
from formkit.logging import get_logger
from formkit.tui import keybindings as kb
from formkit.tui.keybindings import KeybindingsManager
from formkit.tui.keys import Key

logger = get_logger("combobox")

_MODIFIERS = ("ctrl", "alt", "shift")


class ComboboxView(Protocol):
    """Anything that can project a combobox state onto a display surface."""

    def update(self, state: ComboboxState, combobox: Combobox) -> None:
        ...


def project_options(query: str, source: Iterable[Option]) -> tuple[Option, ...]:
    """Filter *source* by *query* and order the result the way it is displayed."""
    return display_order(group_options(filter_options(query, source)))


class Combobox:
    """
    Searchable single/multi select.

    Parameters
    ----------
    config:
        Static configuration.
    callbacks:
        Observer hooks fired after transitions.
    initial_values:
        Values selected at construction; made valid for the mode.
    view:
        Optional projector; receives every committed state.
    events:
        Optional UI event bus.  When given, pointer presses and focus
        moves that target another component close the dropdown.
    keybindings:
        Key-to-action table used by :meth:`key_pressed`.
    """

    def __init__(
        self,
        config: ComboboxConfig,
        callbacks: ComboboxCallbacks | None = None,
        initial_values: Iterable[OptionValue] = (),
        *,
        view: ComboboxView | None = None,
        events: UIEventBus | None = None,
        keybindings: KeybindingsManager | None = None,
    ) -> None:
        self._config = config
        self._callbacks = callbacks or ComboboxCallbacks()
        self._keybindings = keybindings or KeybindingsManager()
        self._store = OptionStore(config.options)
        self._destroyed = False

        # Latest async result; None means "use the master list"
        self._loaded: tuple[Option, ...] | None = None
        # Every option ever returned by the loader, for resolving selections
        self._seen: dict[str, Option] = {}

        self._loader: AsyncOptionLoader | None = None
        if config.load_options is not None:
            self._loader = AsyncOptionLoader(
                config.load_options,
                on_result=self._apply_loaded,
                on_error=self._apply_load_error,
                on_cancel=self._apply_load_cancelled,
                debounce_ms=config.debounce_ms,
                min_search_length=config.min_search_length,
            )

        self._state = ComboboxState.initial(
            project_options("", self._store.options),
            selection.normalise(initial_values, config.mode, config.max_selections),
        )

        self._unsubscribers: list[Callable[[], None]] = []
        if events is not None:
            self._unsubscribers.append(
                events.on(POINTER_DOWN, self._on_outside_event, source=config.id)
            )
            self._unsubscribers.append(
                events.on(FOCUS_CHANGE, self._on_outside_event, source=config.id)
            )

        self._actions: dict[str, Callable[[], None]] = {
            kb.MOVE_NEXT: self.move_next,
            kb.MOVE_PREVIOUS: self.move_previous,
            kb.CONFIRM: self.confirm,
            kb.DISMISS: self.close,
            kb.BLUR: self.close,
            kb.ERASE: self.erase,
        }

        self._view: ComboboxView | None = None
        if view is not None:
            self.attach_view(view)

    # ==================================================================
    # Read access
    # ==================================================================

    @property
    def config(self) -> ComboboxConfig:
        return self._config

    @property
    def state(self) -> ComboboxState:
        return self._state

    def get_state(self) -> ComboboxState:
        """Current snapshot; records are immutable so no copy is needed."""
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def options(self) -> tuple[Option, ...]:
        """Snapshot of the master option list."""
        return self._store.options

    def get_value(self) -> list[OptionValue]:
        return list(self._state.selected_values)

    def get_selected_options(self) -> list[Option]:
        """Selected values resolved to options; unknown values are skipped."""
        resolved = (self._lookup(v) for v in self._state.selected_values)
        return [opt for opt in resolved if opt is not None]

    # ==================================================================
    # View attachment
    # ==================================================================

    def attach_view(self, view: ComboboxView) -> None:
        """Attach *view* and project the current state onto it."""
        if self._destroyed:
            return
        self._view = view
        view.update(self._state, self)

    def detach_view(self) -> None:
        self._view = None

    # ==================================================================
    # Open / close
    # ==================================================================

    def open(self) -> None:
        if not self._interactive() or self._state.is_open:
            return
        self._commit(self._state.evolve(is_open=True, highlighted_index=-1))
        self._notify("on_open", self._state)

    def close(self) -> None:
        if self._destroyed or not self._state.is_open:
            return
        self._commit(self._state.evolve(is_open=False, highlighted_index=-1))
        self._notify("on_close", self._state)

    def toggle(self) -> None:
        if self._state.is_open:
            self.close()
        else:
            self.open()

    # ==================================================================
    # Option store
    # ==================================================================

    def set_options(self, options: Iterable[Option | Mapping[str, Any] | OptionValue]) -> None:
        """Replace the master list and re-filter against the current query."""
        if self._destroyed:
            return
        self._store.set_options(options)
        self._refilter_master()

    def add_option(self, option: Option | Mapping[str, Any] | OptionValue) -> None:
        if self._destroyed:
            return
        self._store.add_option(option)
        self._refilter_master()

    def remove_option(self, value: OptionValue) -> None:
        if self._destroyed:
            return
        self._store.remove_option(value)
        self._refilter_master()

    def _refilter_master(self) -> None:
        self._loaded = None
        self._commit(
            self._state.evolve(
                filtered_options=project_options(self._state.input_value, self._store.options),
                highlighted_index=-1,
            )
        )

    # ==================================================================
    # Selection
    # ==================================================================

    def set_value(self, values: Iterable[OptionValue]) -> None:
        """Replace the selection programmatically. Observers are not notified."""
        if self._destroyed:
            return
        values = selection.normalise(values, self._config.mode, self._config.max_selections)
        self._commit(self._state.evolve(selected_values=values))

    def select(self, value: OptionValue) -> None:
        """
        Select *value*.

        Single mode replaces the selection, clears the query and closes
        the dropdown (also when *value* was already selected).  Multi mode
        toggles *value*, respecting ``max_selections``, and stays open.
        Disabled options are rejected.
        """
        if self._destroyed:
            return
        option = self._lookup(value)
        if option is not None and option.disabled:
            logger.debug("Rejected selection of disabled option %r", value)
            return

        state = self._state
        mode = self._config.mode
        values = selection.select(
            state.selected_values, value, mode, self._config.max_selections
        )

        if mode == SINGLE:
            was_open = state.is_open
            changes = self._cleared_query()
            changes.update(selected_values=values, is_open=False, highlighted_index=-1)
            self._commit(state.evolve(**changes))
            if values is not state.selected_values:
                self._notify("on_change", list(values), self._state)
            if was_open:
                self._notify("on_close", self._state)
            return

        if values is state.selected_values:
            logger.debug("Selection of %r rejected, %d/%s selected", value, len(values), self._config.max_selections)
            return
        if len(values) < len(state.selected_values):
            # Toggled off; the query is left alone
            self._commit(state.evolve(selected_values=values))
        else:
            changes = self._cleared_query()
            changes["selected_values"] = values
            self._commit(state.evolve(**changes))
        self._notify("on_change", list(values), self._state)

    def deselect(self, value: OptionValue) -> None:
        if self._destroyed:
            return
        values = selection.deselect(self._state.selected_values, value)
        if values is self._state.selected_values:
            return
        self._commit(self._state.evolve(selected_values=values))
        self._notify("on_change", list(values), self._state)

    def clear(self) -> None:
        """Empty the selection and the query text."""
        if self._destroyed:
            return
        state = self._state
        values = selection.clear(state.selected_values)
        if values is state.selected_values and not state.input_value:
            return
        changes = self._cleared_query()
        changes["selected_values"] = values
        self._commit(state.evolve(**changes))
        if values is not state.selected_values:
            self._notify("on_change", [], self._state)

    def _cleared_query(self) -> dict[str, Any]:
        """State changes that empty the query text and re-filter accordingly."""
        if not self._state.input_value:
            return {}
        changes: dict[str, Any] = {
            "input_value": "",
            "filtered_options": project_options("", self._source()),
            "highlighted_index": -1,
        }
        if self._loader is not None:
            # A load for the old query must not land on the emptied one
            self._loader.cancel()
            changes.update(is_loading=False, error=None)
        return changes

    # ==================================================================
    # Highlight / keyboard
    # ==================================================================

    def highlight(self, index: int) -> None:
        """Highlight the option at *index*; ignored while closed, disabled or out of range."""
        if not self._interactive() or not self._state.is_open:
            return
        if not navigation.can_highlight(self._state.filtered_options, index):
            return
        self._commit(self._state.evolve(highlighted_index=index))
        self._notify("on_highlight", self._state.filtered_options[index], self._state)

    def move_next(self) -> None:
        """Open when closed, otherwise highlight the next enabled option."""
        if not self._interactive():
            return
        if not self._state.is_open:
            self.open()
            return
        index = navigation.next_index(self._state.filtered_options, self._state.highlighted_index)
        if index != self._state.highlighted_index:
            self.highlight(index)

    def move_previous(self) -> None:
        if not self._interactive() or not self._state.is_open:
            return
        index = navigation.previous_index(self._state.filtered_options, self._state.highlighted_index)
        if index != self._state.highlighted_index:
            self.highlight(index)

    def confirm(self) -> None:
        """Select the highlighted option, if any."""
        if not self._interactive() or not self._state.is_open:
            return
        option = self._state.highlighted_option
        if option is None or option.disabled:
            return
        self.select(option.value)

    def erase(self) -> None:
        """Multi mode with an empty query: drop the last selected value."""
        if not self._interactive():
            return
        if self._config.mode != MULTI or self._state.input_value:
            return
        if self._state.selected_values:
            self.deselect(self._state.selected_values[-1])

    # ==================================================================
    # View intents
    # ==================================================================

    def focus_gained(self) -> None:
        self.open()

    def query_changed(self, text: str) -> None:
        """
        The user edited the query.

        Without a loader the master list is re-filtered immediately.  With
        a loader, a debounced load is scheduled (this requires a running
        event loop) or, for queries shorter than ``min_search_length``,
        the results are cleared.
        """
        if not self._interactive():
            return
        if self._loader is not None:
            if self._loader.request(text):
                self._commit(self._state.evolve(input_value=text, is_loading=True, error=None))
            else:
                self._loaded = ()
                self._commit(
                    self._state.evolve(
                        input_value=text,
                        filtered_options=(),
                        highlighted_index=-1,
                        is_loading=False,
                        error=None,
                    )
                )
        else:
            self._commit(
                self._state.evolve(
                    input_value=text,
                    filtered_options=project_options(text, self._store.options),
                    highlighted_index=-1,
                )
            )
        self._notify("on_input_change", text, self._state)
        if not self._state.is_open:
            self.open()

    def key_pressed(self, key: Key | str, modifiers: Iterable[str] = ()) -> bool:
        """
        Dispatch a key press through the keybinding table.

        *key* is a :class:`Key` or a descriptor (``"down"``, ``"ArrowDown"``,
        ``"shift+tab"``).  Returns ``True`` when the key maps to an action.
        """
        if not self._interactive():
            return False
        if isinstance(key, str):
            held = set(modifiers)
            prefix = "+".join(m for m in _MODIFIERS if m in held)
            key = Key.from_name(f"{prefix}+{key}" if prefix else key)
        action = self._keybindings.find_action(key)
        handler = self._actions.get(action) if action else None
        if handler is None:
            return False
        handler()
        return True

    def option_activated(self, value: OptionValue) -> None:
        """Click-equivalent on a displayed option."""
        if not self._interactive():
            return
        key = option_key(value)
        option = next((o for o in self._state.filtered_options if o.key == key), None)
        if option is None or option.disabled:
            return
        self.select(option.value)

    def option_hovered(self, index: int) -> None:
        self.highlight(index)

    def clear_requested(self) -> None:
        if not self._interactive():
            return
        self.clear()

    def dismiss_requested(self) -> None:
        self.close()

    def _on_outside_event(self, event: Any) -> None:
        if getattr(event, "target", None) != self._config.id:
            self.close()

    # ==================================================================
    # Async loading
    # ==================================================================

    async def wait_for_load(self) -> None:
        """Wait for the pending option load (if any) to settle."""
        if self._loader is not None:
            await self._loader.wait()

    def _apply_loaded(self, query: str, options: list[Option]) -> None:
        if self._destroyed:
            return
        for opt in options:
            self._seen[opt.key] = opt
        self._loaded = tuple(options)
        logger.debug("Combobox %s received %d options for %r", self._config.id, len(options), query)
        # The loader already matched the query; only group and order here
        self._commit(
            self._state.evolve(
                filtered_options=project_options("", self._loaded),
                highlighted_index=-1,
                is_loading=False,
                error=None,
            )
        )

    def _apply_load_cancelled(self) -> None:
        if self._destroyed:
            return
        self._commit(self._state.evolve(is_loading=False, error=None))

    def _apply_load_error(self, exc: Exception) -> None:
        if self._destroyed:
            return
        self._commit(self._state.evolve(is_loading=False, error=str(exc) or type(exc).__name__))
        self._notify("on_error", exc, self._state)

    # ==================================================================
    # Lifecycle
    # ==================================================================

    def destroy(self) -> None:
        """Cancel loads, drop subscriptions and the view, and reset state."""
        if self._destroyed:
            return
        if self._loader is not None:
            self._loader.cancel()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._view = None
        self._destroyed = True
        self._loaded = None
        self._seen.clear()
        self._state = ComboboxState()
        logger.debug("Combobox %s destroyed", self._config.id)

    # ==================================================================
    # Internals
    # ==================================================================

    def _interactive(self) -> bool:
        return not self._destroyed and not self._config.disabled

    def _source(self) -> tuple[Option, ...]:
        return self._loaded if self._loaded is not None else self._store.options

    def _lookup(self, value: OptionValue) -> Option | None:
        option = self._store.find(value)
        if option is None:
            option = self._seen.get(option_key(value))
        return option

    def _commit(self, state: ComboboxState) -> None:
        previous = self._state
        self._state = state
        if self._view is not None:
            self._view.update(state, self)
        if previous.highlighted_index >= 0 and state.highlighted_index < 0:
            self._notify("on_highlight", None, state)

    def _notify(self, name: str, *args: Any) -> None:
        callback = getattr(self._callbacks, name)
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.warning("Combobox %s %s callback error: %s", self._config.id, name, e)
