"""
formkit - schema-driven form widgets.

The centrepiece is the :class:`~formkit.combobox.Combobox`, a searchable
single/multi select with debounced, cancellable asynchronous option
loading, keyboard navigation that skips disabled entries, and grouped
option display.

Example:
    from formkit import Combobox, ComboboxConfig

    box = Combobox(ComboboxConfig(id="fruit", options=["Apple", "Banana", "Cherry"]))
    box.query_changed("an")
    box.state.filtered_options   # (Option(value='Banana', label='Banana', ...),)
"""

from formkit.combobox import (
    MULTI,
    SINGLE,
    AsyncOptionLoader,
    Combobox,
    ComboboxCallbacks,
    ComboboxConfig,
    ComboboxState,
    ComboboxView,
    ComboboxWidget,
    LoadCancelledError,
    Option,
    OptionStore,
    aria_attributes,
    filter_options,
    group_options,
    option_key,
)
from formkit.events import FOCUS_CHANGE, POINTER_DOWN, FocusChangeEvent, PointerEvent, UIEventBus
from formkit.logging import get_logger, setup_logging
from formkit.schema import (
    FieldKind,
    FieldRegistry,
    FieldSchema,
    FormSchema,
    SchemaError,
    default_registry,
    render_field,
)

__version__ = "0.1.0"

__all__ = [
    # Combobox
    "Combobox",
    "ComboboxConfig",
    "ComboboxCallbacks",
    "ComboboxState",
    "ComboboxView",
    "ComboboxWidget",
    "AsyncOptionLoader",
    "LoadCancelledError",
    "Option",
    "OptionStore",
    "SINGLE",
    "MULTI",
    "aria_attributes",
    "filter_options",
    "group_options",
    "option_key",
    # Events
    "UIEventBus",
    "PointerEvent",
    "FocusChangeEvent",
    "POINTER_DOWN",
    "FOCUS_CHANGE",
    # Schema
    "FieldKind",
    "FieldSchema",
    "FormSchema",
    "FieldRegistry",
    "SchemaError",
    "default_registry",
    "render_field",
    # Logging
    "setup_logging",
    "get_logger",
]
