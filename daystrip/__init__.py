"""Top-level package exports.

Public API surface (keep minimal):
 - MainWindow (demo host screen)
 - DatePickerPanel, DateStripWidget (widgets)
 - SelectionController (selection & auto-return engine)
 - Timeline, build_window (window model)
 - PickerConfig
"""

from .config import PickerConfig  # noqa: F401
from .core.timeline import Timeline, build_window  # noqa: F401
from .controller import SelectionController  # noqa: F401
from .ui.components.date_strip import DateStripWidget  # noqa: F401
from .ui.components.picker_panel import DatePickerPanel  # noqa: F401
from .ui.main_window import MainWindow  # noqa: F401

__all__ = [
    "MainWindow",
    "DatePickerPanel",
    "DateStripWidget",
    "SelectionController",
    "Timeline",
    "build_window",
    "PickerConfig",
]
