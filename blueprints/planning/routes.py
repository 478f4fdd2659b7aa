# blueprints/planning/routes.py
from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required

from blueprints.core.errors import parse_payload
from .schemas import AutoFillIn, StudyPlanIn, StudyPlanPatch
from . import services as svc

api_bp = Blueprint("planning_api", __name__)

@api_bp.get("/students/<int:student_id>/study-plans")
@login_required
def study_plans_list(student_id: int):
    items = [svc.plan_to_dict(p, with_subjects=False) for p in svc.list_plans(student_id)]
    return jsonify({"ok": True, "items": items})

@api_bp.post("/study-plans")
@login_required
def study_plans_create():
    data = parse_payload(StudyPlanIn, request.get_json(silent=True))
    result = svc.create_study_plan(svc.PlanRequest(
        student_id=data.student_id,
        course_id=data.course_id,
        date=data.date,
        start_time=data.start_time,
        end_time=data.end_time,
        notes=data.notes,
    ))
    n = len(result.allocated_subjects)
    return jsonify({
        "ok": True,
        "plan": svc.plan_to_dict(result.plan, with_subjects=False),
        "allocated_subjects": [svc.plan_subject_to_dict(ps) for ps in result.allocated_subjects],
        "unallocated_minutes": result.unallocated_minutes,
        "message": f"Study plan created, {n} subject(s) planned.",
    }), 201

@api_bp.get("/study-plans/<int:plan_id>")
@login_required
def study_plans_get(plan_id: int):
    return jsonify({"ok": True, "plan": svc.plan_to_dict(svc.get_plan(plan_id))})

@api_bp.patch("/study-plans/<int:plan_id>")
@login_required
def study_plans_update(plan_id: int):
    data = parse_payload(StudyPlanPatch, request.get_json(silent=True))
    plan = svc.update_plan(plan_id, notes=data.notes, status=data.status)
    return jsonify({"ok": True, "plan": svc.plan_to_dict(plan)})

@api_bp.delete("/study-plans/<int:plan_id>")
@login_required
def study_plans_delete(plan_id: int):
    svc.delete_plan(plan_id)
    return "", 204

@api_bp.post("/students/<int:student_id>/auto-fill")
@login_required
def auto_fill(student_id: int):
    data = parse_payload(AutoFillIn, request.get_json(silent=True))
    dry_run = data.dry_run
    if dry_run is None:
        dry_run = bool(current_app.config.get("AUTOFILL_DEFAULT_DRY_RUN", True))

    report = svc.autofill_topics(student_id, data.start_date, data.end_date, dry_run=dry_run)
    return jsonify(report.to_dict()), (200 if report.success else 400)
