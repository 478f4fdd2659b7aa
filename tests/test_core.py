from __future__ import annotations
import json
import logging

from app import create_app
from blueprints.core.routes import JSONFormatter

def test_health_ok():
    app = create_app("test")
    with app.test_client() as c:
        rv = c.get("/health")
        assert rv.status_code == 200
        data = rv.get_json()
        assert data["status"] == "ok"
        assert data["ts"].endswith("Z")

def test_csrf_endpoint_returns_token():
    app = create_app("test")
    with app.test_client() as c:
        rv = c.get("/api/v1/csrf")
        assert rv.status_code == 200
        assert rv.get_json()["csrf"]

def test_unknown_api_route_is_json(client):
    rv = client.get("/api/v1/nope")
    assert rv.status_code == 404
    body = rv.get_json()
    assert body["ok"] is False
    assert body["errors"][0]["code"] == "NOT_FOUND"

def test_json_formatter_keeps_known_extras():
    rec = logging.LogRecord("blueprints.planning", logging.INFO, __file__, 1, "autofill finished", None, None)
    rec.student_id = 7
    rec.dry_run = True
    rec.unrelated = "x"
    out = json.loads(JSONFormatter().format(rec))
    assert out["msg"] == "autofill finished"
    assert out["student_id"] == 7 and out["dry_run"] is True
    assert "unrelated" not in out

def test_activities_feed(client, make_student, make_course):
    student, course = make_student(), make_course()
    client.post(f"/api/v1/students/{student.id}/weekly-slots",
                json={"course_id": course.id, "day_of_week": 2, "start_time": "16:00", "end_time": "17:00"})
    rv = client.get("/api/v1/activities?limit=5")
    assert rv.status_code == 200
    items = rv.get_json()["items"]
    assert [i["type"] for i in items] == ["weekly_slot_created"]

def test_catalog_endpoints(client, make_course):
    course = make_course("Physics", subjects=(("Optics", 120), ("Mechanics", 90)))
    rv = client.get("/api/v1/courses")
    assert [c["name"] for c in rv.get_json()["items"]] == ["Physics"]
    rv2 = client.get(f"/api/v1/courses/{course.id}/subjects")
    assert [(s["name"], s["duration_minutes"]) for s in rv2.get_json()["items"]] == [
        ("Optics", 120), ("Mechanics", 90)]
    assert client.get("/api/v1/courses/999/subjects").status_code == 404
