from __future__ import annotations
from datetime import date
import pytest

from blueprints.core.errors import NoSubjectsAvailableError, ValidationError
from blueprints.planning.allocator import (
    REVIEW_CAP_MINUTES, ProgressState, allocate, apply_to_states,
    order_candidates, order_review, total_minutes,
)

MONDAY = date(2024, 1, 1)

def _state(id, total, done=0, last=None, subject_id=None):
    st = ProgressState(id=id, subject_id=subject_id or id * 10, total_minutes=total,
                       completed_minutes=done, last_study_date=last)
    st.is_completed = st.remaining_minutes == 0
    return st

def test_untouched_subjects_come_before_started_ones():
    states = [_state(1, 100, done=10), _state(2, 30), _state(3, 60)]
    ordered = [s.id for s in order_candidates(states)]
    # untouched by most remaining, then the started one
    assert ordered == [3, 2, 1]

def test_candidate_ties_break_on_id():
    states = [_state(5, 60), _state(2, 60), _state(9, 60)]
    assert [s.id for s in order_candidates(states)] == [2, 5, 9]

def test_completed_subjects_are_not_candidates():
    states = [_state(1, 60, done=60), _state(2, 60)]
    assert [s.id for s in order_candidates(states)] == [2]

def test_review_order_never_reviewed_first_then_oldest():
    states = [
        _state(1, 60, done=60, last=date(2024, 3, 1)),
        _state(2, 60, done=60, last=date(2024, 1, 1)),
        _state(3, 60, done=60, last=None),
    ]
    assert [s.id for s in order_review(states)] == [3, 2, 1]

def test_larger_untouched_subject_takes_the_window():
    states = [_state(1, 60), _state(2, 90)]
    # -remaining puts B (90) ahead of A (60)
    allocs = allocate(states, 60)
    assert [(a.progress_id, a.minutes) for a in allocs] == [(2, 60)]

def test_equal_subjects_first_id_completes():
    states = [_state(1, 60), _state(2, 60)]
    allocs = allocate(states, 60)
    apply_to_states(states, allocs, MONDAY)
    assert [(a.progress_id, a.minutes) for a in allocs] == [(1, 60)]
    assert states[0].is_completed and states[0].remaining_minutes == 0
    assert states[1].completed_minutes == 0 and states[1].last_study_date is None

def test_window_spills_over_into_next_subject():
    states = [_state(1, 60), _state(2, 90)]
    allocs = allocate(states, 120)
    assert [(a.progress_id, a.minutes) for a in allocs] == [(2, 90), (1, 30)]
    assert total_minutes(allocs) == 120

def test_sum_never_exceeds_window():
    states = [_state(1, 15), _state(2, 20)]
    allocs = allocate(states, 240)
    assert total_minutes(allocs) == 35
    assert total_minutes(allocs) <= 240

@pytest.mark.parametrize("window", [1, 7, 45, 59, 61, 300])
def test_sum_bounded_by_window_for_any_size(window):
    states = [_state(1, 40), _state(2, 25, done=5), _state(3, 100)]
    assert total_minutes(allocate(states, window)) <= window

def test_review_pass_when_everything_is_done():
    states = [
        _state(1, 60, done=60, last=date(2024, 1, 1)),
        _state(2, 90, done=90, last=None),
    ]
    allocs = allocate(states, 30)
    assert len(allocs) == 1
    assert allocs[0].progress_id == 2 and allocs[0].minutes == 30 and allocs[0].is_review

def test_review_pass_caps_each_subject():
    states = [_state(1, 60, done=60), _state(2, 60, done=60), _state(3, 60, done=60)]
    allocs = allocate(states, 80)
    assert [a.minutes for a in allocs] == [REVIEW_CAP_MINUTES, REVIEW_CAP_MINUTES, 20]
    assert all(a.is_review for a in allocs)

def test_review_cap_is_overridable():
    states = [_state(1, 60, done=60), _state(2, 60, done=60)]
    allocs = allocate(states, 120, review_cap=45)
    assert [a.minutes for a in allocs] == [45, 45]

def test_no_review_when_some_subject_is_pending():
    states = [_state(1, 60, done=60), _state(2, 10)]
    allocs = allocate(states, 60)
    assert [(a.progress_id, a.minutes, a.is_review) for a in allocs] == [(2, 10, False)]

def test_empty_course_raises():
    with pytest.raises(NoSubjectsAvailableError):
        allocate([], 60)

@pytest.mark.parametrize("window", [0, -15])
def test_non_positive_window_rejected(window):
    with pytest.raises(ValidationError):
        allocate([_state(1, 60)], window)

def test_apply_to_states_advances_snapshot():
    states = [_state(1, 60), _state(2, 90)]
    allocs = allocate(states, 120)
    apply_to_states(states, allocs, MONDAY)
    a, b = states
    assert b.is_completed and b.remaining_minutes == 0 and b.last_study_date == MONDAY
    assert a.completed_minutes == 30 and a.remaining_minutes == 30 and not a.is_completed
    for s in states:
        assert s.completed_minutes + s.remaining_minutes == s.total_minutes

def test_apply_review_only_touches_date():
    states = [_state(1, 60, done=60)]
    allocs = allocate(states, 30)
    apply_to_states(states, allocs, MONDAY)
    assert states[0].completed_minutes == 60
    assert states[0].remaining_minutes == 0
    assert states[0].last_study_date == MONDAY
