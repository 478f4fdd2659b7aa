# blueprints/catalog/services.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List

from extensions import db
from models import Course, CourseSubject, Student
from blueprints.core.errors import NotFoundError

@dataclass
class SubjectOut:
    id: int
    course_id: int
    name: str
    duration_minutes: int

def list_courses() -> List[Course]:
    return Course.query.order_by(Course.name.asc()).all()

def list_subjects(course_id: int) -> List[SubjectOut]:
    """Catalog entries of a course in id order (empty list for unknown courses)."""
    rows = (CourseSubject.query
            .filter_by(course_id=course_id)
            .order_by(CourseSubject.id.asc())
            .all())
    return [SubjectOut(id=r.id, course_id=r.course_id, name=r.name,
                       duration_minutes=r.duration_minutes) for r in rows]

def subject_names(subject_ids) -> dict[int, str]:
    ids = list(set(subject_ids))
    if not ids:
        return {}
    rows = CourseSubject.query.filter(CourseSubject.id.in_(ids)).all()
    return {r.id: r.name for r in rows}

def get_course(course_id: int) -> Course:
    course = db.session.get(Course, course_id)
    if not course:
        raise NotFoundError("Course not found", details={"course_id": course_id})
    return course

def get_student(student_id: int) -> Student:
    student = db.session.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found", details={"student_id": student_id})
    return student

def ensure_student_and_course(student_id: int, course_id: int) -> tuple[Student, Course]:
    return get_student(student_id), get_course(course_id)
