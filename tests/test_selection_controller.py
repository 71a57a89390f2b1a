from datetime import date, timedelta

from PySide6.QtWidgets import QApplication

from daystrip.controller import SelectionController
from daystrip.core.selection import AUTO_RETURN, Phase
from daystrip.scheduling.delays import ManualDelayScheduler

ANCHOR = date(2026, 10, 19)
PITCH = 84

_app = None


def _ensure_app():
    global _app
    if _app is None:
        _app = QApplication.instance() or QApplication([])


def _make(selected=None, suppress=False):
    _ensure_app()
    clock = ManualDelayScheduler()
    ctrl = SelectionController(
        selected_date=selected,
        suppress_auto_return=suppress,
        today=lambda: ANCHOR,
        scheduler=clock,
    )
    record = {"scroll": [], "selected": [], "phase": []}
    ctrl.scrollRequested.connect(lambda x, a: record["scroll"].append((x, a)))
    ctrl.selectionChanged.connect(record["selected"].append)
    ctrl.phaseChanged.connect(record["phase"].append)
    return ctrl, clock, record


def _initialize(ctrl, clock, record):
    ctrl.on_layout_ready()
    clock.advance(150)
    record["scroll"].clear()


def test_timeline_exposed():
    ctrl, _clock, _rec = _make()
    assert ctrl.anchor == ANCHOR
    assert len(ctrl.timeline) == 15
    assert ctrl.selected_date == ANCHOR
    assert ctrl.selected_index == 7
    assert ctrl.phase is Phase.IDLE


def test_first_layout_centers_once_without_animation():
    ctrl, clock, rec = _make(selected=ANCHOR - timedelta(days=2))
    ctrl.on_layout_ready()
    clock.advance(100)
    ctrl.on_layout_ready()
    assert rec["scroll"] == []
    clock.advance(60)
    assert rec["scroll"] == [(5 * PITCH, False)]
    ctrl.on_layout_ready()
    clock.advance(1000)
    assert rec["scroll"] == [(5 * PITCH, False)]
    assert ctrl.state.initialized


def test_auto_return_clean_idle_path():
    ctrl, clock, rec = _make()
    away = ANCHOR + timedelta(days=3)
    ctrl.on_external_date_change(away, False)
    clock.advance(5999)
    assert ctrl.selected_date == away
    clock.advance(1)
    assert ctrl.selected_date == ANCHOR
    assert rec["scroll"].count((7 * PITCH, True)) == 1
    assert rec["selected"] == [ANCHOR]


def test_auto_return_suppressed():
    ctrl, clock, rec = _make()
    away = ANCHOR - timedelta(days=1)
    ctrl.on_external_date_change(away, True)
    clock.advance(20_000)
    assert ctrl.selected_date == away
    assert rec["selected"] == []
    # Host lifts suppression: countdown starts from here.
    ctrl.set_suppress_auto_return(False)
    clock.advance(6000)
    assert ctrl.selected_date == ANCHOR


def test_initial_selection_away_from_today_arms_timer():
    ctrl, clock, _rec = _make(selected=ANCHOR + timedelta(days=1))
    assert clock.is_pending(AUTO_RETURN)
    clock.advance(6000)
    assert ctrl.selected_date == ANCHOR


def test_no_auto_return_while_dragging():
    ctrl, clock, rec = _make()
    away = ANCHOR + timedelta(days=2)
    ctrl.on_external_date_change(away, False)
    ctrl.on_drag_begin()
    assert ctrl.phase is Phase.DRAGGING
    clock.advance(10_000)
    assert ctrl.selected_date == away
    ctrl.on_drag_end()
    clock.advance(500 + 5999)
    assert ctrl.selected_date == away
    clock.advance(1)
    assert ctrl.selected_date == ANCHOR
    assert rec["phase"] == ["dragging", "idle"]


def test_momentum_keeps_blocking_until_settled():
    ctrl, clock, _rec = _make()
    away = ANCHOR - timedelta(days=4)
    ctrl.on_external_date_change(away, False)
    ctrl.on_drag_begin()
    ctrl.on_drag_end(momentum=True)
    assert ctrl.phase is Phase.SETTLING
    clock.advance(8000)
    assert ctrl.selected_date == away
    ctrl.on_momentum_end()
    clock.advance(6499)
    assert ctrl.selected_date == away
    clock.advance(1)
    assert ctrl.selected_date == ANCHOR


def test_new_interaction_during_grace_restarts_wait():
    ctrl, clock, _rec = _make()
    away = ANCHOR + timedelta(days=5)
    ctrl.on_external_date_change(away, False)
    ctrl.on_drag_begin()
    ctrl.on_drag_end()
    clock.advance(300)
    ctrl.on_drag_begin()
    clock.advance(7000)
    assert ctrl.selected_date == away


def test_tap_is_immediate():
    ctrl, clock, rec = _make()
    day = ANCHOR - timedelta(days=6)
    ctrl.on_user_tap_date(day)
    assert ctrl.selected_date == day
    assert rec["scroll"] == [(1 * PITCH, True)]
    assert rec["selected"] == [day]
    assert clock.now_ms == 0


def test_tap_then_idle_returns_after_grace():
    ctrl, clock, rec = _make()
    day = ANCHOR + timedelta(days=1)
    ctrl.on_user_tap_date(day)
    clock.advance(400 + 5999)
    assert ctrl.selected_date == day
    clock.advance(1)
    assert ctrl.selected_date == ANCHOR
    assert rec["selected"] == [day, ANCHOR]


def test_tap_on_today_does_not_arm():
    ctrl, clock, _rec = _make(selected=ANCHOR + timedelta(days=1))
    ctrl.on_user_tap_date(ANCHOR)
    clock.advance(400)
    assert not clock.is_pending(AUTO_RETURN)


def test_external_change_idempotent():
    once, clock1, rec1 = _make()
    _initialize(once, clock1, rec1)
    twice, clock2, rec2 = _make()
    _initialize(twice, clock2, rec2)
    day = ANCHOR + timedelta(days=2)
    once.on_external_date_change(day, True)
    twice.on_external_date_change(day, True)
    twice.on_external_date_change(day, True)
    clock1.advance(100)
    clock2.advance(100)
    assert once.selected_date == twice.selected_date == day
    assert rec1["scroll"] == rec2["scroll"] == [(9 * PITCH, True)]


def test_rearm_cancels_previous_timer():
    ctrl, clock, rec = _make()
    ctrl.on_external_date_change(ANCHOR + timedelta(days=1), False)
    clock.advance(4000)
    ctrl.on_external_date_change(ANCHOR + timedelta(days=2), False)
    clock.advance(2500)
    assert ctrl.selected_date == ANCHOR + timedelta(days=2)
    clock.advance(3500)
    assert ctrl.selected_date == ANCHOR
    clock.advance(20_000)
    assert rec["selected"] == [ANCHOR]


def test_centering_skipped_during_drag_replayed_after_grace():
    ctrl, clock, rec = _make()
    _initialize(ctrl, clock, rec)
    ctrl.on_drag_begin()
    ctrl.on_external_date_change(ANCHOR - timedelta(days=1), True)
    clock.advance(1000)
    assert rec["scroll"] == []
    ctrl.on_drag_end()
    clock.advance(500 + 50)
    assert rec["scroll"] == [(6 * PITCH, True)]


def test_date_outside_window_is_not_centered():
    ctrl, clock, rec = _make()
    _initialize(ctrl, clock, rec)
    far = ANCHOR + timedelta(days=30)
    ctrl.on_external_date_change(far, True)
    clock.advance(100)
    assert ctrl.selected_date == far
    assert ctrl.selected_index is None
    assert rec["scroll"] == []


def test_dispose_silences_pending_callbacks():
    ctrl, clock, rec = _make()
    ctrl.on_external_date_change(ANCHOR + timedelta(days=1), False)
    ctrl.on_layout_ready()
    ctrl.dispose()
    clock.advance(10_000)
    assert rec["scroll"] == [] and rec["selected"] == []
    ctrl.on_user_tap_date(ANCHOR - timedelta(days=1))
    assert ctrl.selected_date == ANCHOR + timedelta(days=1)
    assert ctrl.disposed


def test_reentrant_host_call_is_queued():
    ctrl, clock, _rec = _make()
    seen = []

    def host(day):
        seen.append((day, ctrl.selected_date))
        ctrl.set_suppress_auto_return(True)

    ctrl.selectionChanged.connect(host)
    day = ANCHOR + timedelta(days=3)
    ctrl.on_user_tap_date(day)
    assert seen == [(day, day)]
    assert ctrl.state.suppress_auto_return
    clock.advance(10_000)
    assert ctrl.selected_date == day


def test_omitted_selection_starts_on_today_and_can_be_cleared():
    ctrl, clock, rec = _make()
    assert ctrl.selected_date == ANCHOR
    assert not clock.is_pending(AUTO_RETURN)
    ctrl.on_external_date_change(None, False)
    assert ctrl.selected_date is None
    assert ctrl.selected_index is None
    assert clock.due_at(AUTO_RETURN) == 6000
    clock.advance(6000)
    assert ctrl.selected_date == ANCHOR
    assert rec["selected"] == [ANCHOR]
