"""Selection & auto-return state machine.

Every input (host date change, tap, drag, momentum, layout, elapsed delay) is an
event; ``transition(state, event, config)`` returns the next immutable state
plus a list of effects for the controller to execute. Delays are named by
purpose and an elapsed delay is just another event, so every scheduled action
re-reads the state current at fire time.

Delay keys:
    first_layout   one-shot, non-animated centering after the first layout
    recenter       animated centering after a non-tap selection change
    grace_release  ends the interaction grace window after a tap/drag/momentum
    auto_return    returns the selection to the anchor after idling elsewhere
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple, Union

from ..config import PickerConfig
from ..utils.datefmt import as_day
from .timeline import Timeline

logger = logging.getLogger(__name__)

FIRST_LAYOUT = "first_layout"
RECENTER = "recenter"
GRACE_RELEASE = "grace_release"
AUTO_RETURN = "auto_return"
DELAY_KEYS = (FIRST_LAYOUT, RECENTER, GRACE_RELEASE, AUTO_RETURN)


class Phase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    SETTLING = "settling"


@dataclass(frozen=True)
class PickerState:
    timeline: Timeline
    selected: Optional[date]
    phase: Phase = Phase.IDLE
    suppress_auto_return: bool = False
    interaction_active: bool = False
    initialized: bool = False
    layout_pending: bool = False
    pending_recenter: bool = False
    disposed: bool = False

    @property
    def anchor(self) -> date:
        return self.timeline.anchor

    @property
    def selected_index(self) -> Optional[int]:
        return self.timeline.index_of(self.selected)


def initial_state(
    timeline: Timeline, selected: Optional[date], suppress_auto_return: bool = False
) -> PickerState:
    return PickerState(
        timeline=timeline,
        selected=as_day(selected) if selected is not None else None,
        suppress_auto_return=suppress_auto_return,
    )


# --- Events ---


@dataclass(frozen=True)
class ExternalDateChange:
    day: Optional[date]
    suppress_auto_return: bool


@dataclass(frozen=True)
class SuppressionChange:
    suppress_auto_return: bool


@dataclass(frozen=True)
class UserTap:
    day: date


@dataclass(frozen=True)
class DragBegin:
    pass


@dataclass(frozen=True)
class DragEnd:
    momentum: bool = False


@dataclass(frozen=True)
class MomentumEnd:
    pass


@dataclass(frozen=True)
class LayoutReady:
    pass


@dataclass(frozen=True)
class DelayElapsed:
    key: str


@dataclass(frozen=True)
class Dispose:
    pass


Event = Union[
    ExternalDateChange,
    SuppressionChange,
    UserTap,
    DragBegin,
    DragEnd,
    MomentumEnd,
    LayoutReady,
    DelayElapsed,
    Dispose,
]


# --- Effects ---


@dataclass(frozen=True)
class ScrollTo:
    index: int
    offset: float
    animated: bool


@dataclass(frozen=True)
class SelectionChanged:
    day: date


@dataclass(frozen=True)
class PhaseChanged:
    phase: Phase


@dataclass(frozen=True)
class Schedule:
    key: str
    delay_ms: int


@dataclass(frozen=True)
class Cancel:
    key: str


Effect = Union[ScrollTo, SelectionChanged, PhaseChanged, Schedule, Cancel]
Result = Tuple[PickerState, List[Effect]]


# --- Guards ---


def can_center(state: PickerState) -> bool:
    return (
        state.initialized
        and state.phase is Phase.IDLE
        and not state.interaction_active
    )


def auto_return_blocked(state: PickerState) -> bool:
    return (
        state.suppress_auto_return
        or state.timeline.is_anchor(state.selected)
        or state.interaction_active
        or state.phase is not Phase.IDLE
    )


# --- Helpers ---


def _scroll_to(state: PickerState, day: Optional[date], animated: bool) -> List[Effect]:
    idx = state.timeline.index_of(day)
    if idx is None:
        logger.debug("No centering target for %s (outside window)", day)
        return []
    offset = state.timeline.offset_for(day)
    return [ScrollTo(index=idx, offset=offset, animated=animated)]


def _rearm(state: PickerState, config: PickerConfig) -> List[Effect]:
    effects: List[Effect] = [Cancel(AUTO_RETURN)]
    if not auto_return_blocked(state):
        effects.append(Schedule(AUTO_RETURN, config.auto_return_ms))
    return effects


def _center_on_change(state: PickerState, config: PickerConfig) -> Result:
    if can_center(state):
        return replace(state, pending_recenter=False), [
            Schedule(RECENTER, config.recenter_ms)
        ]
    # Guard failed: a later drag/momentum end re-evaluates.
    return replace(state, pending_recenter=True), [Cancel(RECENTER)]


def _set_phase(state: PickerState, phase: Phase) -> Result:
    if state.phase is phase:
        return state, []
    return replace(state, phase=phase), [PhaseChanged(phase)]


# --- Handlers ---


def _on_external_date_change(
    state: PickerState, event: ExternalDateChange, config: PickerConfig
) -> Result:
    day = as_day(event.day) if event.day is not None else None
    state = replace(
        state, selected=day, suppress_auto_return=event.suppress_auto_return
    )
    state, effects = _center_on_change(state, config)
    return state, effects + _rearm(state, config)


def _on_suppression_change(
    state: PickerState, event: SuppressionChange, config: PickerConfig
) -> Result:
    state = replace(state, suppress_auto_return=event.suppress_auto_return)
    return state, _rearm(state, config)


def _on_user_tap(state: PickerState, event: UserTap, config: PickerConfig) -> Result:
    day = as_day(event.day)
    state = replace(
        state, selected=day, interaction_active=True, pending_recenter=False
    )
    effects = _scroll_to(state, day, animated=True)
    effects += [
        Cancel(RECENTER),
        Schedule(GRACE_RELEASE, config.tap_grace_ms),
        Cancel(AUTO_RETURN),
        SelectionChanged(day),
    ]
    return state, effects


def _on_drag_begin(state: PickerState, event: DragBegin, config: PickerConfig) -> Result:
    state, effects = _set_phase(state, Phase.DRAGGING)
    state = replace(state, interaction_active=True)
    return state, effects + [Cancel(GRACE_RELEASE), Cancel(AUTO_RETURN)]


def _release(state: PickerState, phase: Phase, config: PickerConfig) -> Result:
    state, effects = _set_phase(state, phase)
    state = replace(state, interaction_active=True)
    effects.append(Schedule(GRACE_RELEASE, config.drag_grace_ms))
    return state, effects + _rearm(state, config)


def _on_drag_end(state: PickerState, event: DragEnd, config: PickerConfig) -> Result:
    return _release(state, Phase.SETTLING if event.momentum else Phase.IDLE, config)


def _on_momentum_end(
    state: PickerState, event: MomentumEnd, config: PickerConfig
) -> Result:
    return _release(state, Phase.IDLE, config)


def _on_layout_ready(
    state: PickerState, event: LayoutReady, config: PickerConfig
) -> Result:
    if state.initialized or state.layout_pending:
        return state, []
    return replace(state, layout_pending=True), [
        Schedule(FIRST_LAYOUT, config.first_layout_ms)
    ]


def _on_first_layout(state: PickerState, config: PickerConfig) -> Result:
    if state.initialized:
        return state, []
    state = replace(
        state, initialized=True, layout_pending=False, pending_recenter=False
    )
    return state, _scroll_to(state, state.selected, animated=False)


def _on_recenter(state: PickerState, config: PickerConfig) -> Result:
    if not can_center(state):
        return replace(state, pending_recenter=True), []
    state = replace(state, pending_recenter=False)
    return state, _scroll_to(state, state.selected, animated=True)


def _on_grace_release(state: PickerState, config: PickerConfig) -> Result:
    if state.phase is Phase.DRAGGING:
        return state, []
    state = replace(state, interaction_active=False)
    effects: List[Effect] = []
    if state.pending_recenter and can_center(state):
        state = replace(state, pending_recenter=False)
        effects.append(Schedule(RECENTER, config.recenter_ms))
    return state, effects + _rearm(state, config)


def _on_auto_return(state: PickerState, config: PickerConfig) -> Result:
    if auto_return_blocked(state):
        return state, []
    anchor = state.anchor
    logger.debug("Auto-return to %s (was %s)", anchor, state.selected)
    state = replace(state, selected=anchor, pending_recenter=False)
    effects: List[Effect] = [Cancel(RECENTER)]
    effects += _scroll_to(state, anchor, animated=True)
    effects.append(SelectionChanged(anchor))
    return state, effects


_DELAY_HANDLERS = {
    FIRST_LAYOUT: _on_first_layout,
    RECENTER: _on_recenter,
    GRACE_RELEASE: _on_grace_release,
    AUTO_RETURN: _on_auto_return,
}


def _on_delay_elapsed(
    state: PickerState, event: DelayElapsed, config: PickerConfig
) -> Result:
    handler = _DELAY_HANDLERS.get(event.key)
    if handler is None:
        logger.debug("Ignoring unknown delay key %r", event.key)
        return state, []
    return handler(state, config)


def _on_dispose(state: PickerState, event: Dispose, config: PickerConfig) -> Result:
    return replace(state, disposed=True), [Cancel(key) for key in DELAY_KEYS]


_HANDLERS = {
    ExternalDateChange: _on_external_date_change,
    SuppressionChange: _on_suppression_change,
    UserTap: _on_user_tap,
    DragBegin: _on_drag_begin,
    DragEnd: _on_drag_end,
    MomentumEnd: _on_momentum_end,
    LayoutReady: _on_layout_ready,
    DelayElapsed: _on_delay_elapsed,
    Dispose: _on_dispose,
}


def transition(state: PickerState, event: Event, config: PickerConfig) -> Result:
    """Apply one event; a disposed state absorbs everything."""
    if state.disposed:
        return state, []
    handler = _HANDLERS[type(event)]
    new_state, effects = handler(state, event, config)
    logger.debug("%s -> %s", event, effects)
    return new_state, effects


__all__ = [
    "Phase",
    "PickerState",
    "initial_state",
    "transition",
    "can_center",
    "auto_return_blocked",
    "ExternalDateChange",
    "SuppressionChange",
    "UserTap",
    "DragBegin",
    "DragEnd",
    "MomentumEnd",
    "LayoutReady",
    "DelayElapsed",
    "Dispose",
    "ScrollTo",
    "SelectionChanged",
    "PhaseChanged",
    "Schedule",
    "Cancel",
    "FIRST_LAYOUT",
    "RECENTER",
    "GRACE_RELEASE",
    "AUTO_RETURN",
    "DELAY_KEYS",
]
