# blueprints/planning/allocator.py
"""Greedy split of one study window between the subjects of a course.

Everything here works on plain dataclasses so it can run without a database:
``allocate`` decides, ``apply_to_states`` advances a snapshot. Persisting the
outcome is the job of ``blueprints.planning.services``.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence

from blueprints.core.errors import NoSubjectsAvailableError, ValidationError

REVIEW_CAP_MINUTES = 30

@dataclass
class ProgressState:
    id: int
    subject_id: int
    total_minutes: int
    completed_minutes: int = 0
    remaining_minutes: Optional[int] = None
    is_completed: bool = False
    last_study_date: Optional[date] = None

    def __post_init__(self):
        if self.remaining_minutes is None:
            self.remaining_minutes = max(0, self.total_minutes - self.completed_minutes)

    @property
    def has_started(self) -> bool:
        return self.completed_minutes > 0

    def consume(self, minutes: int, on_date: date) -> None:
        self.completed_minutes += minutes
        self.remaining_minutes = max(0, self.total_minutes - self.completed_minutes)
        self.is_completed = self.remaining_minutes == 0
        self.last_study_date = on_date

    def review(self, on_date: date) -> None:
        self.last_study_date = on_date

@dataclass(frozen=True)
class Allocation:
    progress_id: int
    subject_id: int
    minutes: int
    is_review: bool = False

def order_candidates(states: Iterable[ProgressState]) -> List[ProgressState]:
    """Incomplete subjects: untouched first, then most remaining time, then id."""
    pending = [s for s in states if not s.is_completed]
    return sorted(pending, key=lambda s: (s.has_started, -s.remaining_minutes, s.id))

def order_review(states: Iterable[ProgressState]) -> List[ProgressState]:
    """Completed subjects, never-reviewed first, then oldest last_study_date."""
    done = [s for s in states if s.is_completed]
    return sorted(done, key=lambda s: (s.last_study_date is not None,
                                       s.last_study_date or date.min, s.id))

def allocate(states: Sequence[ProgressState], window_minutes: int,
             review_cap: int = REVIEW_CAP_MINUTES) -> List[Allocation]:
    if window_minutes <= 0:
        raise ValidationError("Study window must be longer than zero minutes",
                              details={"window_minutes": window_minutes})
    if review_cap <= 0:
        raise ValidationError("Review cap must be positive", details={"review_cap": review_cap})

    left = window_minutes
    out: List[Allocation] = []

    for s in order_candidates(states):
        if left <= 0:
            break
        take = min(left, s.remaining_minutes)
        if take > 0:
            out.append(Allocation(progress_id=s.id, subject_id=s.subject_id, minutes=take))
            left -= take

    # every subject is done: spend the window on revision instead
    if not out and left > 0:
        for s in order_review(states):
            if left <= 0:
                break
            take = min(left, review_cap)
            out.append(Allocation(progress_id=s.id, subject_id=s.subject_id, minutes=take, is_review=True))
            left -= take

    if not out:
        raise NoSubjectsAvailableError("Course has no subjects to plan")
    return out

def apply_to_states(states: Sequence[ProgressState], allocations: Iterable[Allocation], on_date: date) -> None:
    by_id = {s.id: s for s in states}
    for a in allocations:
        s = by_id[a.progress_id]
        if a.is_review:
            s.review(on_date)
        else:
            s.consume(a.minutes, on_date)

def total_minutes(allocations: Iterable[Allocation]) -> int:
    return sum(a.minutes for a in allocations)
