"""
Searchable single/multi select with optional asynchronous option loading.
"""

from formkit.combobox.combobox import Combobox, ComboboxView, project_options
from formkit.combobox.config import ComboboxCallbacks, ComboboxConfig
from formkit.combobox.filtering import UNGROUPED, filter_options, group_options
from formkit.combobox.loader import AsyncOptionLoader, LoadCancelledError, LoadOptions
from formkit.combobox.options import Option, OptionStore, OptionValue, option_key, same_value
from formkit.combobox.selection import MULTI, SINGLE, SelectionMode
from formkit.combobox.state import ComboboxState
from formkit.combobox.widget import ComboboxWidget, aria_attributes

__all__ = [
    # Controller
    "Combobox",
    "ComboboxView",
    "ComboboxState",
    "project_options",
    # Configuration
    "ComboboxConfig",
    "ComboboxCallbacks",
    "SelectionMode",
    "SINGLE",
    "MULTI",
    # Options
    "Option",
    "OptionStore",
    "OptionValue",
    "option_key",
    "same_value",
    "filter_options",
    "group_options",
    "UNGROUPED",
    # Async loading
    "AsyncOptionLoader",
    "LoadCancelledError",
    "LoadOptions",
    # Rendering
    "ComboboxWidget",
    "aria_attributes",
]
