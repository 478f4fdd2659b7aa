# blueprints/catalog/routes.py
from __future__ import annotations
from dataclasses import asdict

from flask import Blueprint, jsonify
from flask_login import login_required

from . import services as svc

api_bp = Blueprint("catalog_api", __name__)

@api_bp.get("/courses")
@login_required
def courses_list():
    items = [{"id": c.id, "name": c.name, "subjects_count": len(c.subjects)} for c in svc.list_courses()]
    return jsonify({"ok": True, "items": items})

@api_bp.get("/courses/<int:course_id>/subjects")
@login_required
def course_subjects(course_id: int):
    course = svc.get_course(course_id)
    items = [asdict(s) for s in svc.list_subjects(course.id)]
    return jsonify({"ok": True, "course": {"id": course.id, "name": course.name}, "items": items})
