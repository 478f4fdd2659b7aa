# blueprints/activity/routes.py
from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import login_required

from . import services as svc

api_bp = Blueprint("activity_api", __name__)

@api_bp.get("/activities")
@login_required
def activities_list():
    try:
        limit = min(100, max(1, int(request.args.get("limit", 10))))
    except ValueError:
        limit = 10
    items = [
        {"id": a.id, "type": a.type, "message": a.message, "related_id": a.related_id,
         "created_at": a.created_at.isoformat()}
        for a in svc.recent_activities(limit)
    ]
    return jsonify({"ok": True, "items": items})
