from __future__ import annotations
from datetime import time
import pytest

from app import create_app
from extensions import db
from models import Course, CourseSubject, Student, WeeklyStudySlot

@pytest.fixture()
def app():
    app = create_app("test")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture()
def client(app):
    return app.test_client()

@pytest.fixture()
def make_student(app):
    counter = {"n": 0}

    def _make(first_name="Ada", last_name="Lovelace"):
        counter["n"] += 1
        s = Student(first_name=first_name, last_name=last_name,
                    student_number=f"S-{counter['n']:04d}", class_name="10A")
        db.session.add(s)
        db.session.commit()
        return s
    return _make

@pytest.fixture()
def make_course(app):
    def _make(name="Math", subjects=(("A", 60), ("B", 90))):
        course = Course(name=name)
        db.session.add(course)
        db.session.flush()
        for subj_name, minutes in subjects:
            db.session.add(CourseSubject(course_id=course.id, name=subj_name, duration_minutes=minutes))
        db.session.commit()
        return course
    return _make

@pytest.fixture()
def make_slot(app):
    def _make(student, course, day=1, start=time(9, 0), end=time(10, 0)):
        slot = WeeklyStudySlot(student_id=student.id, course_id=course.id, day_of_week=day,
                               start_time=start, end_time=end)
        db.session.add(slot)
        db.session.commit()
        return slot
    return _make
