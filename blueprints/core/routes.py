from __future__ import annotations
import json, logging
from datetime import datetime

from flask import g, jsonify, request
from flask_wtf.csrf import CSRFError, generate_csrf
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers.response import Response

from extensions import csrf, db

from . import bp, api_bp
from .errors import PlannerError

log = logging.getLogger(__name__)

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.utcnow().isoformat(timespec="milliseconds") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in ("event", "path", "method", "status", "duration_ms",
                    "student_id", "course_id", "dry_run", "filled", "errors"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(payload, ensure_ascii=False, default=str)

def _setup_structured_logging(app):
    logger = app.logger
    has_json = any(
        isinstance(h, logging.StreamHandler)
        and isinstance(getattr(h, "formatter", None), JSONFormatter)
        for h in logger.handlers
    )
    if not has_json:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        # service loggers (blueprints.*) go through the same handler
        svc_logger = logging.getLogger("blueprints")
        svc_logger.addHandler(handler)
        svc_logger.setLevel(logging.INFO)

@api_bp.get("/csrf")
@csrf.exempt
def get_csrf():
    token = generate_csrf()
    resp = jsonify({"csrf": token})
    resp.set_cookie("csrf_token", token, samesite="Lax")
    return resp

@bp.app_errorhandler(PlannerError)
def _planner_error(err: PlannerError):
    db.session.rollback()
    return jsonify({"ok": False, "errors": [err.to_dict()]}), err.status

@bp.app_errorhandler(CSRFError)
def _csrf_error(err: CSRFError):
    return jsonify({"ok": False, "errors": [{"code": "CSRF_FAILED", "message": err.description}]}), 400

@bp.app_errorhandler(HTTPException)
def _http_error(err: HTTPException):
    if not request.path.startswith("/api/"):
        return err
    code = (err.name or "error").upper().replace(" ", "_")
    return jsonify({"ok": False, "errors": [{"code": code, "message": err.description}]}), err.code

@bp.before_app_request
def _start_timer():
    g._req_start = datetime.utcnow()

@bp.after_app_request
def _log_request(response: Response):
    start = getattr(g, "_req_start", None)
    duration_ms = int((datetime.utcnow() - start).total_seconds() * 1000) if start else None
    extra = {
        "event": "http_request",
        "path": request.path,
        "method": request.method,
        "status": response.status_code,
        "duration_ms": duration_ms,
    }
    log.info("request handled", extra=extra)
    return response

@bp.record_once
def _on_register(state):
    _setup_structured_logging(state.app)

@bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "ts": datetime.utcnow().isoformat(timespec="seconds") + "Z",
    })
