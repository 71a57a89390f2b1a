"""Date picker panel.

Assembles a ``SelectionController`` and a ``DateStripWidget`` and wires them:

    strip.dragStarted        -> controller.on_drag_begin
    strip.dragEnded(bool)    -> controller.on_drag_end(momentum)
    strip.momentumEnded      -> controller.on_momentum_end
    strip.dateTapped(date)   -> controller.on_user_tap_date
    strip.layoutReady        -> controller.on_layout_ready
    controller.scrollRequested(x, animated) -> strip.scrollToOffset
    controller.selectionChanged(date)       -> strip highlight + dateSelected
    controller.phaseChanged(str)            -> strip.setInteractionPhase

Public API:
    setSelectedDate(day, suppress_auto_return=False)  host-driven change
    setSuppressAutoReturn(flag)
    selectedDate()
    controller (SelectionController)
    strip (DateStripWidget)

Signals:
    dateSelected(object)   # user tap or auto-return picked a day
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QVBoxLayout, QWidget

from ...config import PickerConfig
from ...controller import SelectionController
from .date_strip import DateStripWidget


class DatePickerPanel(QWidget):
    dateSelected = Signal(object)

    def __init__(
        self,
        parent=None,
        *,
        selected_date: Optional[date] = None,
        suppress_auto_return: bool = False,
        config: Optional[PickerConfig] = None,
        today: Optional[Callable[[], date]] = None,
        scheduler=None,
    ):
        super().__init__(parent)
        self.controller = SelectionController(
            self,
            selected_date=selected_date,
            suppress_auto_return=suppress_auto_return,
            config=config,
            today=today,
            scheduler=scheduler,
        )
        cfg = self.controller.config
        self.strip = DateStripWidget(
            self.controller.timeline, animation_ms=cfg.scroll_animation_ms
        )
        self.strip.setSelectedDay(self.controller.selected_date)
        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.strip)
        self.setLayout(layout)

        # Surface -> controller
        self.strip.dragStarted.connect(self.controller.on_drag_begin)
        self.strip.dragEnded.connect(self.controller.on_drag_end)
        self.strip.momentumEnded.connect(self.controller.on_momentum_end)
        self.strip.dateTapped.connect(self.controller.on_user_tap_date)
        self.strip.layoutReady.connect(self.controller.on_layout_ready)
        # Controller -> surface / host
        self.controller.scrollRequested.connect(self.strip.scrollToOffset)
        self.controller.selectionChanged.connect(self._onSelectionChanged)
        self.controller.phaseChanged.connect(self.strip.setInteractionPhase)

    def setSelectedDate(self, day: Optional[date], suppress_auto_return: bool = False):
        self.controller.on_external_date_change(day, suppress_auto_return)
        self.strip.setSelectedDay(self.controller.selected_date)

    def setSuppressAutoReturn(self, suppress: bool):
        self.controller.set_suppress_auto_return(suppress)

    def selectedDate(self) -> Optional[date]:
        return self.controller.selected_date

    def dispose(self):
        """Stop pending delays so nothing fires against a closed view."""
        self.controller.dispose()

    def _onSelectionChanged(self, day: date):
        self.strip.setSelectedDay(day)
        self.dateSelected.emit(day)

    def closeEvent(self, event):  # type: ignore[override]
        self.dispose()
        super().closeEvent(event)


__all__ = ["DatePickerPanel"]
