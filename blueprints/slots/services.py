# blueprints/slots/services.py
from __future__ import annotations
import logging
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from extensions import db
from models import WeeklyStudySlot
from blueprints.catalog.services import get_course, get_student
from blueprints.core.errors import ConflictError, NotFoundError, ValidationError

log = logging.getLogger(__name__)

def slot_minutes(start: time, end: time) -> int:
    """Length of a same-day window in whole minutes."""
    dt0 = datetime.combine(date(2000, 1, 1), start)
    dt1 = datetime.combine(date(2000, 1, 1), end)
    return max(0, int((dt1 - dt0).total_seconds() // 60))

def _validate(day_of_week: int, start: time, end: time) -> None:
    if not 1 <= int(day_of_week) <= 7:
        raise ValidationError("day_of_week must be between 1 (Monday) and 7 (Sunday)",
                              details={"day_of_week": day_of_week})
    if start >= end:
        raise ValidationError("start_time must be before end_time",
                              details={"start_time": start.isoformat(), "end_time": end.isoformat()})

def find_conflicts(student_id: int, day_of_week: int, start: time, end: time,
                   exclude_id: Optional[int] = None) -> List[WeeklyStudySlot]:
    """Slots of the same student and day whose [start, end) overlaps the given one."""
    q = WeeklyStudySlot.query.filter_by(student_id=student_id, day_of_week=day_of_week)
    if exclude_id is not None:
        q = q.filter(WeeklyStudySlot.id != exclude_id)
    return [s for s in q.all() if start < s.end_time and end > s.start_time]

def _raise_on_conflict(student_id: int, day_of_week: int, start: time, end: time,
                       exclude_id: Optional[int] = None) -> None:
    clashes = find_conflicts(student_id, day_of_week, start, end, exclude_id=exclude_id)
    if clashes:
        c = clashes[0]
        raise ConflictError(
            "Slot overlaps an existing weekly slot",
            details={"slot_id": c.id, "day_of_week": c.day_of_week,
                     "start_time": c.start_time.strftime("%H:%M"),
                     "end_time": c.end_time.strftime("%H:%M")},
        )

def get_slot(slot_id: int) -> WeeklyStudySlot:
    slot = db.session.get(WeeklyStudySlot, slot_id)
    if not slot:
        raise NotFoundError("Weekly slot not found", details={"slot_id": slot_id})
    return slot

def create_slot(*, student_id: int, course_id: int, day_of_week: int,
                start_time: time, end_time: time) -> WeeklyStudySlot:
    _validate(day_of_week, start_time, end_time)
    get_student(student_id)
    get_course(course_id)
    _raise_on_conflict(student_id, day_of_week, start_time, end_time)

    slot = WeeklyStudySlot(student_id=student_id, course_id=course_id, day_of_week=day_of_week,
                           start_time=start_time, end_time=end_time)
    db.session.add(slot)
    db.session.commit()
    log.info("weekly slot created", extra={"student_id": student_id, "course_id": course_id})
    return slot

def update_slot(slot_id: int, patch: Dict[str, Any]) -> WeeklyStudySlot:
    slot = get_slot(slot_id)
    if patch.get("student_id") is not None and patch["student_id"] != slot.student_id:
        raise ValidationError("student_id of a slot cannot be changed", details={"slot_id": slot_id})

    def pick(key):
        val = patch.get(key)
        return getattr(slot, key) if val is None else val

    course_id, day = pick("course_id"), pick("day_of_week")
    start, end = pick("start_time"), pick("end_time")

    _validate(day, start, end)
    if course_id != slot.course_id:
        get_course(course_id)
    _raise_on_conflict(slot.student_id, day, start, end, exclude_id=slot.id)

    slot.course_id, slot.day_of_week, slot.start_time, slot.end_time = course_id, day, start, end
    db.session.commit()
    return slot

def delete_slot(slot_id: int) -> None:
    slot = get_slot(slot_id)
    db.session.delete(slot)
    db.session.commit()

def list_by_student(student_id: int) -> List[WeeklyStudySlot]:
    return (WeeklyStudySlot.query
            .filter_by(student_id=student_id)
            .order_by(WeeklyStudySlot.day_of_week.asc(),
                      WeeklyStudySlot.start_time.asc(),
                      WeeklyStudySlot.id.asc())
            .all())

def weekly_total_minutes(student_id: int) -> int:
    return sum(slot_minutes(s.start_time, s.end_time) for s in list_by_student(student_id))

def slot_to_dict(s: WeeklyStudySlot) -> dict:
    return {
        "id": s.id,
        "student_id": s.student_id,
        "course_id": s.course_id,
        "day_of_week": s.day_of_week,
        "start_time": s.start_time.strftime("%H:%M"),
        "end_time": s.end_time.strftime("%H:%M"),
        "duration_minutes": slot_minutes(s.start_time, s.end_time),
    }
