# blueprints/progress/services.py
from __future__ import annotations
import logging
from datetime import date
from typing import Iterable, List, Optional

from extensions import db
from models import CourseSubject, SubjectProgress
from blueprints.catalog.services import list_subjects
from blueprints.core.errors import NotFoundError, ValidationError
from blueprints.planning.allocator import ProgressState

log = logging.getLogger(__name__)

def ensure_progress(student_id: int, course_id: int) -> List[SubjectProgress]:
    """Create the missing progress rows of a course for one student.

    Idempotent. Flushes but does not commit, so the caller decides the
    transaction boundary. Returns every row of the course ordered by id.
    """
    subjects = list_subjects(course_id)
    if not subjects:
        raise NotFoundError("Course has no subjects in the catalog", details={"course_id": course_id})

    subject_ids = [s.id for s in subjects]
    existing = {
        p.subject_id: p
        for p in SubjectProgress.query.filter(
            SubjectProgress.student_id == student_id,
            SubjectProgress.subject_id.in_(subject_ids),
        ).all()
    }
    created = 0
    for s in subjects:
        if s.id in existing:
            continue
        row = SubjectProgress(
            student_id=student_id,
            subject_id=s.id,
            total_minutes=s.duration_minutes,
            completed_minutes=0,
            remaining_minutes=s.duration_minutes,
            is_completed=s.duration_minutes == 0,
            last_study_date=None,
        )
        db.session.add(row)
        existing[s.id] = row
        created += 1
    if created:
        db.session.flush()
        log.info("progress rows created", extra={"student_id": student_id, "course_id": course_id})
    return sorted(existing.values(), key=lambda p: p.id)

def get_progress(progress_id: int) -> SubjectProgress:
    p = db.session.get(SubjectProgress, progress_id)
    if not p:
        raise NotFoundError("Subject progress not found", details={"progress_id": progress_id})
    return p

def list_progress(student_id: int, course_id: Optional[int] = None) -> List[SubjectProgress]:
    q = SubjectProgress.query.filter(SubjectProgress.student_id == student_id)
    if course_id is not None:
        q = q.join(CourseSubject, CourseSubject.id == SubjectProgress.subject_id) \
             .filter(CourseSubject.course_id == course_id)
    return q.order_by(SubjectProgress.id.asc()).all()

def apply_allocation(progress: SubjectProgress, minutes: int, on_date: date) -> SubjectProgress:
    if minutes <= 0 or minutes > progress.remaining_minutes:
        raise ValidationError(
            "Allocated minutes exceed what is left of the subject",
            details={"progress_id": progress.id, "minutes": minutes,
                     "remaining_minutes": progress.remaining_minutes},
        )
    progress.completed_minutes += minutes
    progress.remaining_minutes = max(0, progress.total_minutes - progress.completed_minutes)
    progress.is_completed = progress.remaining_minutes == 0
    progress.last_study_date = on_date
    return progress

def record_review(progress: SubjectProgress, on_date: date) -> SubjectProgress:
    # counters stay as they are
    progress.last_study_date = on_date
    return progress

def snapshot(rows: Iterable[SubjectProgress]) -> List[ProgressState]:
    return [
        ProgressState(
            id=p.id,
            subject_id=p.subject_id,
            total_minutes=p.total_minutes,
            completed_minutes=p.completed_minutes,
            remaining_minutes=p.remaining_minutes,
            is_completed=bool(p.is_completed),
            last_study_date=p.last_study_date,
        )
        for p in rows
    ]

def progress_to_dict(p: SubjectProgress) -> dict:
    return {
        "id": p.id,
        "student_id": p.student_id,
        "subject_id": p.subject_id,
        "subject_name": p.subject.name if p.subject else None,
        "total_minutes": p.total_minutes,
        "completed_minutes": p.completed_minutes,
        "remaining_minutes": p.remaining_minutes,
        "is_completed": bool(p.is_completed),
        "state": p.state.value,
        "last_study_date": p.last_study_date.isoformat() if p.last_study_date else None,
    }
