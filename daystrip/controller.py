"""Selection & auto-return controller.

Goals:
- Keep one authoritative (selected date, scroll target, interaction phase) triple
  for the date strip while host date changes, taps, drags, momentum and timers
  arrive in any order.
- Return to today after a period of idle browsing, never while the user is
  touching the strip and never when the host says the date came from navigation.

Design:
SelectionController wraps the pure ``transition`` function from
``core.selection``. Each public call becomes an event; the returned effects are
executed in order:
    ScrollTo          -> scrollRequested(offset, animated)
    SelectionChanged  -> selectionChanged(date)
    PhaseChanged      -> phaseChanged('idle'|'dragging'|'settling')
    Schedule / Cancel -> delay scheduler (QTimer per key by default)

Events raised while effects are being executed (e.g. a slot connected to
selectionChanged calling back into the controller) are queued and processed
after the current one, so state changes apply in delivery order.

Signals:
    scrollRequested(float, bool)   # offset px, animated
    selectionChanged(object)       # datetime.date; taps and auto-return only
    phaseChanged(str)
"""

from __future__ import annotations

import logging
from collections import deque
from datetime import date
from functools import partial
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from .config import PickerConfig
from .core.selection import (
    Cancel,
    DelayElapsed,
    Dispose,
    DragBegin,
    DragEnd,
    ExternalDateChange,
    LayoutReady,
    MomentumEnd,
    Phase,
    PhaseChanged,
    PickerState,
    Schedule,
    ScrollTo,
    SelectionChanged,
    SuppressionChange,
    UserTap,
    initial_state,
    transition,
)
from .core.timeline import Timeline
from .scheduling.delays import QtDelayScheduler

logger = logging.getLogger(__name__)


class SelectionController(QObject):
    scrollRequested = Signal(float, bool)
    selectionChanged = Signal(object)
    phaseChanged = Signal(str)

    def __init__(
        self,
        parent: Optional[QObject] = None,
        *,
        selected_date: Optional[date] = None,
        suppress_auto_return: bool = False,
        config: Optional[PickerConfig] = None,
        today: Optional[Callable[[], date]] = None,
        scheduler=None,
    ):
        super().__init__(parent)
        self._config = config or PickerConfig()
        today_source = today or date.today
        timeline = Timeline(
            today_source(), self._config.half_width, self._config.geometry
        )
        # Omitted selection starts on today; clearing it goes through
        # on_external_date_change(None).
        if selected_date is None:
            selected_date = timeline.anchor
        self._state: PickerState = initial_state(
            timeline, selected_date, suppress_auto_return
        )
        self._scheduler = scheduler if scheduler is not None else QtDelayScheduler(self)
        self._queue: deque = deque()
        self._dispatching = False
        # Initial selection may already be away from today.
        self._dispatch(SuppressionChange(suppress_auto_return))

    # Queries
    @property
    def config(self) -> PickerConfig:
        return self._config

    @property
    def scheduler(self):
        return self._scheduler

    @property
    def state(self) -> PickerState:
        return self._state

    @property
    def timeline(self) -> Timeline:
        return self._state.timeline

    @property
    def anchor(self) -> date:
        return self._state.anchor

    @property
    def selected_date(self) -> Optional[date]:
        return self._state.selected

    @property
    def selected_index(self) -> Optional[int]:
        return self._state.selected_index

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def disposed(self) -> bool:
        return self._state.disposed

    # Host inputs
    def on_external_date_change(
        self, day: Optional[date], suppress_auto_return: bool = False
    ):
        self._dispatch(ExternalDateChange(day, bool(suppress_auto_return)))

    def set_suppress_auto_return(self, suppress: bool):
        self._dispatch(SuppressionChange(bool(suppress)))

    # Surface events
    def on_user_tap_date(self, day: date):
        self._dispatch(UserTap(day))

    def on_drag_begin(self):
        self._dispatch(DragBegin())

    def on_drag_end(self, momentum: bool = False):
        self._dispatch(DragEnd(bool(momentum)))

    def on_momentum_end(self):
        self._dispatch(MomentumEnd())

    def on_layout_ready(self):
        self._dispatch(LayoutReady())

    def dispose(self):
        """Cancel every pending delay; later calls and callbacks become no-ops."""
        self._dispatch(Dispose())

    # Internal
    def _dispatch(self, event):
        self._queue.append(event)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._queue:
                current = self._queue.popleft()
                self._state, effects = transition(self._state, current, self._config)
                for effect in effects:
                    self._apply(effect)
        finally:
            self._dispatching = False

    def _apply(self, effect):
        if isinstance(effect, ScrollTo):
            self.scrollRequested.emit(effect.offset, effect.animated)
        elif isinstance(effect, SelectionChanged):
            self.selectionChanged.emit(effect.day)
        elif isinstance(effect, PhaseChanged):
            self.phaseChanged.emit(effect.phase.value)
        elif isinstance(effect, Schedule):
            self._scheduler.schedule(
                effect.key, effect.delay_ms, partial(self._onDelay, effect.key)
            )
        elif isinstance(effect, Cancel):
            self._scheduler.cancel(effect.key)
        else:  # pragma: no cover
            logger.warning("Unhandled effect %r", effect)

    def _onDelay(self, key: str):
        self._dispatch(DelayElapsed(key))


__all__ = ["SelectionController"]
