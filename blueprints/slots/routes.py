# blueprints/slots/routes.py
from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import login_required

from blueprints.activity import services as activity
from blueprints.catalog.services import get_student
from blueprints.core.errors import parse_payload
from .schemas import WeeklySlotIn, WeeklySlotPatch
from . import services as svc

api_bp = Blueprint("slots_api", __name__)

@api_bp.get("/students/<int:student_id>/weekly-slots")
@login_required
def weekly_slots_list(student_id: int):
    get_student(student_id)
    return jsonify({"ok": True, "items": [svc.slot_to_dict(s) for s in svc.list_by_student(student_id)]})

@api_bp.post("/students/<int:student_id>/weekly-slots")
@login_required
def weekly_slots_create(student_id: int):
    data = parse_payload(WeeklySlotIn, request.get_json(silent=True))
    slot = svc.create_slot(
        student_id=student_id,
        course_id=data.course_id,
        day_of_week=data.day_of_week,
        start_time=data.start_time,
        end_time=data.end_time,
    )
    activity.log_activity(activity.WEEKLY_SLOT_CREATED, "Weekly study slot added", related_id=slot.id)
    return jsonify({"ok": True, "slot": svc.slot_to_dict(slot)}), 201

@api_bp.patch("/weekly-slots/<int:slot_id>")
@login_required
def weekly_slots_update(slot_id: int):
    data = parse_payload(WeeklySlotPatch, request.get_json(silent=True))
    slot = svc.update_slot(slot_id, data.model_dump(exclude_none=True))
    return jsonify({"ok": True, "slot": svc.slot_to_dict(slot)})

@api_bp.delete("/weekly-slots/<int:slot_id>")
@login_required
def weekly_slots_delete(slot_id: int):
    svc.delete_slot(slot_id)
    return "", 204

@api_bp.get("/students/<int:student_id>/weekly-total-minutes")
@login_required
def weekly_total_minutes(student_id: int):
    get_student(student_id)
    return jsonify({"ok": True, "total_minutes": svc.weekly_total_minutes(student_id)})
