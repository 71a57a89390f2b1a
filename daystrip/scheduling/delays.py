"""Named, cancellable delayed actions.

Both schedulers expose the same small API:

    schedule(key, delay_ms, callback)  replace any pending action of ``key``
    cancel(key)                        drop the pending action of ``key`` (no-op if none)
    cancel_all()
    is_pending(key) -> bool

``QtDelayScheduler`` backs each key with a single-shot ``QTimer`` on the GUI
thread. ``ManualDelayScheduler`` runs the same contract on a virtual
millisecond clock advanced explicitly, for deterministic tests and headless
simulation.
"""

from __future__ import annotations

import itertools
import logging
from typing import Callable, Dict, Optional, Tuple

from PySide6.QtCore import QObject, QTimer, Qt

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class QtDelayScheduler(QObject):
    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._timers: Dict[str, QTimer] = {}

    def schedule(self, key: str, delay_ms: int, callback: Callback) -> None:
        self.cancel(key)
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setTimerType(Qt.PreciseTimer)
        timer.timeout.connect(lambda: self._fire(key, timer, callback))
        self._timers[key] = timer
        timer.start(max(0, int(delay_ms)))

    def cancel(self, key: str) -> None:
        timer = self._timers.pop(key, None)
        if timer is None:
            return
        timer.stop()
        timer.deleteLater()

    def cancel_all(self) -> None:
        for key in list(self._timers):
            self.cancel(key)

    def is_pending(self, key: str) -> bool:
        return key in self._timers

    def _fire(self, key: str, timer: QTimer, callback: Callback) -> None:
        # A replaced timer may still deliver a queued timeout; only the live one counts.
        if self._timers.get(key) is not timer:
            return
        del self._timers[key]
        timer.deleteLater()
        logger.debug("delay %s elapsed", key)
        callback()


class ManualDelayScheduler:
    """Virtual-clock scheduler; nothing fires until ``advance`` is called."""

    def __init__(self):
        self._now_ms = 0
        self._seq = itertools.count()
        self._pending: Dict[str, Tuple[int, int, Callback]] = {}

    @property
    def now_ms(self) -> int:
        return self._now_ms

    def schedule(self, key: str, delay_ms: int, callback: Callback) -> None:
        due = self._now_ms + max(0, int(delay_ms))
        self._pending[key] = (due, next(self._seq), callback)

    def cancel(self, key: str) -> None:
        self._pending.pop(key, None)

    def cancel_all(self) -> None:
        self._pending.clear()

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def due_at(self, key: str) -> Optional[int]:
        entry = self._pending.get(key)
        return entry[0] if entry else None

    def advance(self, ms: int) -> None:
        """Move the clock forward, firing due actions in (due time, schedule order)."""
        target = self._now_ms + ms
        while True:
            due_items = [
                (due, seq, key)
                for key, (due, seq, _cb) in self._pending.items()
                if due <= target
            ]
            if not due_items:
                break
            due, _seq, key = min(due_items)
            callback = self._pending.pop(key)[2]
            self._now_ms = due
            logger.debug("delay %s elapsed at %d ms", key, due)
            callback()
        self._now_ms = target


__all__ = ["QtDelayScheduler", "ManualDelayScheduler"]
