from __future__ import annotations
from datetime import time
import pytest

from models import Activity, WeeklyStudySlot
from blueprints.core.errors import ConflictError, NotFoundError, ValidationError
from blueprints.slots import services as svc

def _create(student, course, day=1, start=time(9, 0), end=time(10, 0)):
    return svc.create_slot(student_id=student.id, course_id=course.id, day_of_week=day,
                           start_time=start, end_time=end)

def test_overlapping_slot_is_rejected(make_student, make_course):
    student, course = make_student(), make_course()
    existing = _create(student, course)
    with pytest.raises(ConflictError) as exc:
        _create(student, course, start=time(9, 30), end=time(10, 30))
    assert exc.value.details["slot_id"] == existing.id
    assert WeeklyStudySlot.query.count() == 1

def test_adjacent_slots_are_accepted(make_student, make_course):
    student, course = make_student(), make_course()
    _create(student, course)
    _create(student, course, start=time(10, 0), end=time(11, 0))
    _create(student, course, start=time(8, 0), end=time(9, 0))
    assert WeeklyStudySlot.query.count() == 3

def test_same_time_other_day_or_student_is_fine(make_student, make_course):
    s1, s2, course = make_student(), make_student("Alan", "Turing"), make_course()
    _create(s1, course)
    _create(s1, course, day=2)
    _create(s2, course)
    assert WeeklyStudySlot.query.count() == 3

def test_slot_enclosing_another_conflicts(make_student, make_course):
    student, course = make_student(), make_course()
    _create(student, course, start=time(9, 15), end=time(9, 45))
    with pytest.raises(ConflictError):
        _create(student, course, start=time(9, 0), end=time(10, 0))

@pytest.mark.parametrize("day,start,end", [
    (0, time(9, 0), time(10, 0)),
    (8, time(9, 0), time(10, 0)),
    (1, time(10, 0), time(10, 0)),
    (1, time(11, 0), time(10, 0)),
])
def test_invalid_slot_rejected(make_student, make_course, day, start, end):
    student, course = make_student(), make_course()
    with pytest.raises(ValidationError):
        _create(student, course, day=day, start=start, end=end)

def test_unknown_course_rejected(make_student):
    student = make_student()
    with pytest.raises(NotFoundError):
        svc.create_slot(student_id=student.id, course_id=42, day_of_week=1,
                        start_time=time(9, 0), end_time=time(10, 0))

def test_update_does_not_conflict_with_itself(make_student, make_course):
    student, course = make_student(), make_course()
    slot = _create(student, course)
    updated = svc.update_slot(slot.id, {"end_time": time(10, 30)})
    assert updated.end_time == time(10, 30)
    assert updated.start_time == time(9, 0)

def test_update_into_other_slot_conflicts(make_student, make_course):
    student, course = make_student(), make_course()
    _create(student, course)
    other = _create(student, course, start=time(11, 0), end=time(12, 0))
    with pytest.raises(ConflictError):
        svc.update_slot(other.id, {"start_time": time(9, 45)})

def test_update_cannot_move_slot_to_another_student(make_student, make_course):
    s1, s2, course = make_student(), make_student("Alan", "Turing"), make_course()
    slot = _create(s1, course)
    with pytest.raises(ValidationError):
        svc.update_slot(slot.id, {"student_id": s2.id})

def test_list_is_ordered_by_day_then_start(make_student, make_course):
    student, course = make_student(), make_course()
    _create(student, course, day=3, start=time(8, 0), end=time(9, 0))
    _create(student, course, day=1, start=time(14, 0), end=time(15, 0))
    _create(student, course, day=1, start=time(9, 0), end=time(10, 0))
    got = [(s.day_of_week, s.start_time) for s in svc.list_by_student(student.id)]
    assert got == [(1, time(9, 0)), (1, time(14, 0)), (3, time(8, 0))]

def test_weekly_total_minutes(make_student, make_course):
    student, course = make_student(), make_course()
    assert svc.weekly_total_minutes(student.id) == 0
    _create(student, course)                                         # 60
    _create(student, course, day=2, start=time(9, 0), end=time(11, 30))  # 150
    assert svc.weekly_total_minutes(student.id) == 210

def test_delete_slot(make_student, make_course):
    student, course = make_student(), make_course()
    slot = _create(student, course)
    svc.delete_slot(slot.id)
    assert WeeklyStudySlot.query.count() == 0
    with pytest.raises(NotFoundError):
        svc.get_slot(slot.id)

# ---------- API ----------
def test_api_create_and_conflict(client, make_student, make_course):
    student, course = make_student(), make_course()
    url = f"/api/v1/students/{student.id}/weekly-slots"
    r = client.post(url, json={"course_id": course.id, "day_of_week": 1,
                               "start_time": "09:00", "end_time": "10:00"})
    assert r.status_code == 201, r.get_json()
    assert r.get_json()["slot"]["duration_minutes"] == 60
    assert Activity.query.filter_by(type="weekly_slot_created").count() == 1

    r2 = client.post(url, json={"course_id": course.id, "day_of_week": 1,
                                "start_time": "09:30", "end_time": "10:30"})
    assert r2.status_code == 409
    err = r2.get_json()["errors"][0]
    assert err["code"] == "SLOT_CONFLICT"

    r3 = client.get(url)
    assert r3.status_code == 200
    assert len(r3.get_json()["items"]) == 1

def test_api_validation_error(client, make_student, make_course):
    student, course = make_student(), make_course()
    r = client.post(f"/api/v1/students/{student.id}/weekly-slots",
                    json={"course_id": course.id, "day_of_week": 9,
                          "start_time": "09:00", "end_time": "10:00"})
    assert r.status_code == 400
    assert r.get_json()["errors"][0]["code"] == "VALIDATION_ERROR"

def test_api_patch_delete_and_total(client, make_student, make_course, make_slot):
    student, course = make_student(), make_course()
    slot = make_slot(student, course)
    r = client.patch(f"/api/v1/weekly-slots/{slot.id}", json={"end_time": "11:00"})
    assert r.status_code == 200, r.get_json()
    assert r.get_json()["slot"]["end_time"] == "11:00"

    r2 = client.get(f"/api/v1/students/{student.id}/weekly-total-minutes")
    assert r2.get_json()["total_minutes"] == 120

    r3 = client.delete(f"/api/v1/weekly-slots/{slot.id}")
    assert r3.status_code == 204
    r4 = client.delete(f"/api/v1/weekly-slots/{slot.id}")
    assert r4.status_code == 404
