"""
Idempotent seed script.
Usage:
  python seed.py --reset         # drop and recreate the DB, demo data and admin@example.com
  python seed.py --ensure-admin  # only create the admin user (no demo data)
  python seed.py                 # soft fill of whatever demo data is missing
"""
from datetime import time
import argparse
from sqlalchemy import func

from app import create_app
from extensions import db
from models import Course, CourseSubject, Role, Student, User, WeeklyStudySlot

DEMO_COURSES = {
    "Mathematics": [("Algebra", 240), ("Geometry", 180), ("Trigonometry", 120)],
    "Physics": [("Mechanics", 200), ("Optics", 90)],
}

# (course, day_of_week, start, end)
DEMO_SLOTS = [
    ("Mathematics", 1, time(17, 0), time(18, 30)),
    ("Physics", 3, time(17, 0), time(18, 0)),
    ("Mathematics", 6, time(10, 0), time(12, 0)),
]

def get_or_create(model, defaults=None, **by):
    """Find a row by its unique keys or create it (flush, no commit)."""
    inst = db.session.query(model).filter_by(**by).first()
    if inst:
        return inst, False
    data = dict(by)
    if defaults:
        data.update(defaults)
    inst = model(**data)
    db.session.add(inst)
    db.session.flush()
    return inst, True

def seed_catalog():
    courses = {}
    for course_name, subjects in DEMO_COURSES.items():
        course, _ = get_or_create(Course, name=course_name)
        for subject_name, minutes in subjects:
            get_or_create(CourseSubject, course_id=course.id, name=subject_name,
                          defaults=dict(duration_minutes=minutes))
        courses[course_name] = course
    db.session.commit()
    return courses

def seed_student(courses):
    student, _ = get_or_create(Student, student_number="DEMO-0001",
                               defaults=dict(first_name="Ada", last_name="Lovelace", class_name="11B"))
    for course_name, day, start, end in DEMO_SLOTS:
        get_or_create(WeeklyStudySlot, student_id=student.id, day_of_week=day, start_time=start,
                      defaults=dict(course_id=courses[course_name].id, end_time=end))
    db.session.commit()
    return student

def ensure_admin():
    exists = db.session.query(User).filter(func.lower(User.email) == "admin@example.com").first()
    if exists:
        return False
    u = User(email="admin@example.com", role=Role.ADMIN.value, is_active_flag=True)
    u.set_password("pass")
    db.session.add(u)
    db.session.commit()
    return True

def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--reset", action="store_true", help="drop + create + full seed (demo)")
    parser.add_argument("--ensure-admin", action="store_true", help="create only admin@example.com")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        if args.reset:
            db.drop_all()
            db.create_all()
            seed_student(seed_catalog())
            ensure_admin()
            print("[seed] reset+seed complete")
            return

        if args.ensure_admin:
            db.create_all()
            created = ensure_admin()
            print("Admin created." if created else "Admin already exists.")
            return

        db.create_all()
        seed_student(seed_catalog())
        print("[seed] soft seed complete")

if __name__ == "__main__":
    main()
