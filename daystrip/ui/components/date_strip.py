"""Date strip UI component.

A horizontally scrolling row of day items around today. The strip is the
scrollable surface the selection controller drives:

- accepts ``scrollToOffset(x, animated)`` commands
- reports drag start/end and momentum end from touch/mouse flicks
- reports taps on items
- carries leading/trailing padding of ``(viewport width - item width) / 2`` so
  that scrolling to ``index * pitch`` centers that item

Implementation notes:
Drag/momentum detection uses ``QScroller`` state changes on the viewport:
    Dragging             -> dragStarted
    Dragging->Scrolling  -> dragEnded(True)   (finger lifted, still coasting)
    Dragging->Inactive   -> dragEnded(False)
    Inactive after coasting -> momentumEnded
Touching a coasting strip goes Scrolling->Pressed; the coast only ends once
the scroller is Inactive again, or a new drag starts from the catch.
Snap positions are set at each item pitch so flicks settle on an item.
Padding is recomputed on resize; the controller is not asked to re-center.

Signals:
    dateTapped(object)     # datetime.date
    dragStarted()
    dragEnded(bool)        # True when momentum scrolling follows
    momentumEnded()
    layoutReady()          # once, on first show
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from PySide6.QtCore import (
    QEasingCurve,
    QPropertyAnimation,
    QSize,
    Qt,
    QTimer,
    Signal,
)
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QPushButton,
    QScrollArea,
    QScroller,
    QSizePolicy,
    QWidget,
)

from ...core.timeline import Timeline, leading_padding
from ...utils.datefmt import format_day_label, same_day

logger = logging.getLogger(__name__)

_ITEM_STYLE = """
QPushButton {
    background: rgba(255, 255, 255, 25);
    color: rgba(255, 255, 255, 180);
    border: none;
    border-radius: 12px;
    font-size: 11px;
}
QPushButton[today="true"] { color: rgba(255, 255, 255, 235); font-weight: 600; }
QPushButton:checked {
    background: rgba(255, 255, 255, 80);
    color: #fff;
    font-weight: 700;
}
QPushButton:checked[phase="dragging"] { background: rgba(255, 255, 255, 45); }
"""


class DateItemButton(QPushButton):
    """One day: weekday / day number / month."""

    def __init__(self, day: date, *, is_today: bool = False, width: int = 80, parent=None):
        super().__init__(parent)
        self.day = day
        weekday, num, month = format_day_label(day)
        self.setText(f"{weekday}\n{num}\n{month}")
        self.setCheckable(True)
        self.setAutoExclusive(False)
        self.setFixedSize(width, 70)
        self.setProperty("today", is_today)
        self.setProperty("phase", "idle")
        self.setFocusPolicy(Qt.NoFocus)

    def setPhase(self, phase: str):
        if self.property("phase") == phase:
            return
        self.setProperty("phase", phase)
        # Re-polish so the dynamic property selector applies.
        self.style().unpolish(self)
        self.style().polish(self)


class DateStripWidget(QScrollArea):
    dateTapped = Signal(object)
    dragStarted = Signal()
    dragEnded = Signal(bool)
    momentumEnded = Signal()
    layoutReady = Signal()

    def __init__(self, timeline: Timeline, parent=None, *, animation_ms: int = 250):
        super().__init__(parent)
        self._timeline = timeline
        self._items: List[DateItemButton] = []
        self._selected: Optional[date] = None
        self._phase = "idle"
        self._layout_emitted = False
        self._scroller_state = QScroller.State.Inactive
        self._coasting = False

        self.setFrameShape(QFrame.Shape.NoFrame)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setWidgetResizable(False)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setFixedHeight(80)
        self.setStyleSheet(
            "QScrollArea { background: rgba(0, 0, 0, 25); }" + _ITEM_STYLE
        )

        self._content = QWidget()
        self._row = QHBoxLayout()
        self._row.setContentsMargins(0, 5, 0, 5)
        self._row.setSpacing(int(2 * timeline.geometry.margin))
        anchor = timeline.anchor
        for day in timeline:
            btn = DateItemButton(
                day,
                is_today=same_day(day, anchor),
                width=int(timeline.geometry.item_width),
            )
            btn.clicked.connect(lambda _checked=False, d=day: self._onItemClicked(d))
            self._row.addWidget(btn)
            self._items.append(btn)
        self._content.setLayout(self._row)
        self.setWidget(self._content)

        self._animation = QPropertyAnimation(self.horizontalScrollBar(), b"value", self)
        self._animation.setDuration(max(0, int(animation_ms)))
        self._animation.setEasingCurve(QEasingCurve.Type.OutCubic)

        QScroller.grabGesture(
            self.viewport(), QScroller.ScrollerGestureType.LeftMouseButtonGesture
        )
        self._scroller = QScroller.scroller(self.viewport())
        self._scroller.setSnapPositionsX(
            [i * timeline.geometry.pitch for i in range(len(timeline))]
        )
        self._scroller.stateChanged.connect(self._onScrollerState)

        self._applyPadding()

    # --- Public API ---
    def timeline(self) -> Timeline:
        return self._timeline

    def items(self) -> List[DateItemButton]:
        return list(self._items)

    def scrollToOffset(self, offset: float, animated: bool = True):
        bar = self.horizontalScrollBar()
        target = int(round(offset))
        self._animation.stop()
        if animated and self._animation.duration() > 0:
            self._animation.setStartValue(bar.value())
            self._animation.setEndValue(target)
            self._animation.start()
        else:
            bar.setValue(target)

    def currentOffset(self) -> float:
        return float(self.horizontalScrollBar().value())

    def centeredIndex(self) -> int:
        """Index of the item under the viewport center."""
        return self._timeline.index_at_offset(self.currentOffset())

    def centeredDate(self) -> date:
        return self._timeline[self.centeredIndex()]

    def setSelectedDay(self, day: Optional[date]):
        self._selected = day
        for btn in self._items:
            selected = same_day(btn.day, day)
            if btn.isChecked() != selected:
                btn.setChecked(selected)
            btn.setPhase(self._phase if selected else "idle")

    def selectedDay(self) -> Optional[date]:
        return self._selected

    def setInteractionPhase(self, phase: str):
        self._phase = phase
        for btn in self._items:
            btn.setPhase(phase if btn.isChecked() else "idle")

    def leadingPadding(self) -> float:
        return leading_padding(
            self.viewport().width(), self._timeline.geometry.item_width
        )

    def sizeHint(self):  # type: ignore[override]
        return QSize(int(self._timeline.geometry.pitch * 5), 80)

    # --- Internal ---
    def _applyPadding(self):
        pad = int(round(self.leadingPadding()))
        self._row.setContentsMargins(pad, 5, pad, 5)
        geometry = self._timeline.geometry
        count = len(self._items)
        width = 2 * pad + count * int(geometry.item_width)
        width += max(0, count - 1) * int(2 * geometry.margin)
        self._content.setFixedSize(width, 80)

    def _onItemClicked(self, day: date):
        # Keep check state owned by setSelectedDay, not the button toggle.
        self.setSelectedDay(self._selected)
        self.dateTapped.emit(day)

    def _onScrollerState(self, state):
        previous = self._scroller_state
        self._scroller_state = state
        logger.debug("scroller %s -> %s", previous, state)
        S = QScroller.State
        if state == S.Dragging and previous != S.Dragging:
            # Catching a coasting strip and dragging again is a new drag.
            self._coasting = False
            self._animation.stop()
            self.dragStarted.emit()
        elif previous == S.Dragging and state == S.Scrolling:
            self._coasting = True
            self.dragEnded.emit(True)
        elif previous == S.Dragging and state == S.Inactive:
            self.dragEnded.emit(False)
        elif state == S.Inactive and self._coasting:
            # Scrolling->Inactive, or a caught flick released (Pressed->Inactive).
            self._coasting = False
            self.momentumEnded.emit()

    # --- Qt overrides ---
    def resizeEvent(self, event):  # type: ignore[override]
        super().resizeEvent(event)
        offset = self.currentOffset()
        self._applyPadding()
        self.horizontalScrollBar().setValue(int(offset))

    def showEvent(self, event):  # type: ignore[override]
        super().showEvent(event)
        if not self._layout_emitted:
            self._layout_emitted = True
            # Emit after the pending layout pass has been processed.
            QTimer.singleShot(0, self.layoutReady.emit)


__all__ = ["DateStripWidget", "DateItemButton"]
