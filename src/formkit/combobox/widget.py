"""
Terminal projection of a combobox.

``ComboboxWidget`` renders a :class:`ComboboxState` as styled text lines
and feeds key presses and focus changes back into its :class:`Combobox`.
"""

from __future__ import annotations

from dataclasses import dataclass

from formkit.combobox.combobox import Combobox
from formkit.combobox.config import ComboboxConfig
from formkit.combobox.options import Option
from formkit.combobox.selection import MULTI
from formkit.combobox.state import ComboboxState
from formkit.tui.ansi import FG, strip_ansi, style, truncate
from formkit.tui.component import Component
from formkit.tui.keys import Key, parse_key


def aria_attributes(state: ComboboxState, config: ComboboxConfig) -> dict[str, str]:
    """
    Accessibility attributes of the combobox input for the given state.

    Front-ends that render to a markup tree attach these to the text input.
    """
    attrs = {
        "role": "combobox",
        "aria-haspopup": "listbox",
        "aria-expanded": "true" if state.is_open else "false",
        "aria-controls": f"{config.id}-listbox",
        "aria-autocomplete": "list",
        "data-state": "open" if state.is_open else "closed",
    }
    if state.highlighted_option is not None:
        attrs["aria-activedescendant"] = f"{config.id}-option-{state.highlighted_index}"
    if config.required:
        attrs["aria-required"] = "true"
    if config.disabled:
        attrs["aria-disabled"] = "true"
    return attrs


@dataclass(frozen=True)
class _Row:
    """One dropdown line: a group header (index -1) or an option."""

    text: str
    index: int = -1


class ComboboxWidget(Component):
    """
    Text renderer for a :class:`Combobox`.

    Parameters
    ----------
    combobox:
        The controller to project; the widget attaches itself as its view.
    max_visible:
        Maximum number of dropdown rows shown at once.  ``0`` means unlimited.
    """

    def __init__(self, combobox: Combobox, max_visible: int = 0) -> None:
        super().__init__()
        self._combobox = combobox
        self._config = combobox.config
        self._state = combobox.state
        self._max_visible = max_visible
        self._scroll_offset = 0
        combobox.attach_view(self)

    @property
    def state(self) -> ComboboxState:
        return self._state

    def update(self, state: ComboboxState, combobox: Combobox) -> None:
        self._state = state
        self.invalidate()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, width: int) -> list[str]:
        lines = [self._render_control(width)]
        if self._state.is_open:
            lines.extend(self._render_dropdown(width))
        self._dirty = False
        return lines

    def _label(self, option: Option, selected: bool = False) -> str:
        renderer = self._config.render_selected if selected else self._config.render_option
        if renderer is not None:
            return renderer(option)
        return f"{option.icon} {option.label}" if option.icon and not selected else option.label

    def _render_control(self, width: int) -> str:
        state = self._state
        parts: list[str] = []

        if self._config.mode == MULTI:
            parts.extend(
                f"[{self._label(opt, selected=True)} ×]"
                for opt in self._combobox.get_selected_options()
            )
            if state.input_value:
                parts.append(state.input_value)
        elif state.input_value:
            parts.append(state.input_value)
        else:
            selected = self._combobox.get_selected_options()
            if selected:
                parts.append(self._label(selected[0], selected=True))

        if not parts and self._config.placeholder:
            parts.append(style(self._config.placeholder, dim=True))

        indicators: list[str] = []
        if self._config.clearable and state.selected_values:
            indicators.append("×")
        indicators.append("▲" if state.is_open else "▼")

        body = " ".join(parts)
        suffix = " " + " ".join(indicators)
        room = max(0, width - len(suffix))
        if len(strip_ansi(body)) > room:
            body = truncate(strip_ansi(body), room)
        if room:
            # Pad by visible width; body may carry escape codes
            line = body + " " * (room - len(strip_ansi(body))) + suffix
        else:
            line = suffix.strip()

        if self._config.disabled:
            return style(line, dim=True)
        return line

    def _rows(self) -> list[_Row]:
        rows: list[_Row] = []
        index = 0
        for group, options in self._state.grouped_options.items():
            if group:
                rows.append(_Row(text=group))
            for _ in options:
                rows.append(_Row(text="", index=index))
                index += 1
        return rows

    def _render_option(self, option: Option, index: int, width: int) -> str:
        state = self._state
        highlighted = index == state.highlighted_index
        marker = ">" if highlighted else " "
        check = "✓" if state.is_selected(option.value) else " "
        desc = f"  {option.description}" if option.description else ""
        content = truncate(f" {marker} {check} {self._label(option)}{desc}", width)
        if option.disabled:
            return style(content, dim=True, strikethrough=True)
        if highlighted:
            return style(content, bold=True, underline=True)
        return content

    def _render_dropdown(self, width: int) -> list[str]:
        state = self._state
        if state.is_loading:
            return [style(f"  {self._config.loading_message}", dim=True)]
        if state.error:
            return [style(truncate(f"  {state.error}", width), fg=FG.RED)]
        if not state.filtered_options:
            return [style(f"  {self._config.no_options_message}", dim=True)]

        rows = self._rows()
        display_count = len(rows)
        if self._max_visible > 0:
            display_count = min(display_count, self._max_visible)

        # Keep the highlighted row inside the window
        target = next((i for i, r in enumerate(rows) if r.index == state.highlighted_index), -1)
        if target >= 0:
            if target < self._scroll_offset:
                self._scroll_offset = target
            elif target >= self._scroll_offset + display_count:
                self._scroll_offset = target - display_count + 1
        else:
            self._scroll_offset = 0
        self._scroll_offset = max(0, min(self._scroll_offset, len(rows) - display_count))

        lines: list[str] = []
        if self._scroll_offset > 0:
            lines.append(style("  ▲ more above", dim=True))
        for row in rows[self._scroll_offset:self._scroll_offset + display_count]:
            if row.index < 0:
                lines.append(style(truncate(row.text, width), bold=True, fg=FG.CYAN))
            else:
                option = state.filtered_options[row.index]
                lines.append(self._render_option(option, row.index, width))
        if self._scroll_offset + display_count < len(rows):
            lines.append(style("  ▼ more below", dim=True))
        return lines

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def handle_input(self, key: Key) -> bool:
        """Edit the query with printable keys; route everything else to the combobox."""
        if not self._focused or self._config.disabled:
            return False

        query = self._state.input_value
        if key.is_printable:
            self._combobox.query_changed(query + key.char)
            return True
        if key.name == "backspace" and query:
            self._combobox.query_changed(query[:-1])
            return True
        return self._combobox.key_pressed(key)

    def handle_bytes(self, data: bytes) -> bool:
        """Decode raw terminal input and handle it like :meth:`handle_input`."""
        return self.handle_input(parse_key(data))

    def on_focus_change(self, focused: bool) -> None:
        if focused:
            self._combobox.focus_gained()
        else:
            self._combobox.dismiss_requested()
