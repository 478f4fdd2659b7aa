# blueprints/progress/routes.py
from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import login_required
from pydantic import BaseModel, Field

from extensions import db
from blueprints.catalog.services import ensure_student_and_course, get_student
from blueprints.core.errors import parse_payload
from . import services as svc

api_bp = Blueprint("progress_api", __name__)

class InitializeProgressIn(BaseModel):
    course_id: int = Field(ge=1)

@api_bp.get("/students/<int:student_id>/subject-progress")
@login_required
def subject_progress_list(student_id: int):
    get_student(student_id)
    course_id = request.args.get("course_id", type=int)
    items = [svc.progress_to_dict(p) for p in svc.list_progress(student_id, course_id)]
    return jsonify({"ok": True, "items": items})

@api_bp.post("/students/<int:student_id>/initialize-progress")
@login_required
def initialize_progress(student_id: int):
    data = parse_payload(InitializeProgressIn, request.get_json(silent=True))
    ensure_student_and_course(student_id, data.course_id)
    rows = svc.ensure_progress(student_id, data.course_id)
    db.session.commit()
    return jsonify({"ok": True, "items": [svc.progress_to_dict(p) for p in rows]}), 201
