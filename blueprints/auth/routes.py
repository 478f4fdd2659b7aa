# blueprints/auth/routes.py
from __future__ import annotations
import time
from typing import Optional

from flask import Blueprint, request, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user

from extensions import csrf, login_manager
from models import User

api_bp = Blueprint("auth_api", __name__)

DEFAULT_RL_MAX = 5
DEFAULT_RL_WIN = 300  # 5 minutes
_login_attempts: dict[str, list[float]] = {}  # key: ip|email -> [timestamps]

# ---------- rate limit ----------
def _rl_key(email: str) -> str:
    ip = request.headers.get("X-Forwarded-For", request.remote_addr or "0.0.0.0").split(",")[0].strip()
    return f"{ip}|{(email or '').lower()}"

def _rl_check_and_hit(email: str) -> bool:
    now = time.time()
    win = current_app.config.get("AUTH_RL_WINDOW", DEFAULT_RL_WIN)
    mx = current_app.config.get("AUTH_RL_MAX", DEFAULT_RL_MAX)
    bucket = _login_attempts.setdefault(_rl_key(email), [])
    cutoff = now - win
    while bucket and bucket[0] < cutoff:
        bucket.pop(0)
    if len(bucket) >= mx:
        return False
    bucket.append(now)
    return True

@login_manager.unauthorized_handler
def _unauth():
    return jsonify({"ok": False, "errors": [{"code": "UNAUTHORIZED", "message": "Login required"}]}), 401

# ---------- API ----------
@api_bp.post("/auth/login")
@csrf.exempt
def api_login():
    payload = request.get_json(silent=True) or request.form or {}
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password") or ""

    if not email or not password:
        return jsonify({"ok": False, "errors": [{"code": "MISSING_CREDENTIALS"}]}), 400

    if not _rl_check_and_hit(email):
        return jsonify({"ok": False, "errors": [{"code": "TOO_MANY_ATTEMPTS"}]}), 429

    user: Optional[User] = User.query.filter_by(email=email).first()
    if not user or not user.password_hash or not user.check_password(password):
        return jsonify({"ok": False, "errors": [{"code": "INVALID_CREDENTIALS"}]}), 401

    if not user.is_active:
        return jsonify({"ok": False, "errors": [{"code": "INACTIVE"}]}), 403

    login_user(user, remember=True)
    return jsonify({"ok": True, "user": {"id": user.id, "email": user.email, "role": user.role}})

@api_bp.post("/auth/logout")
@login_required
def api_logout():
    logout_user()
    return jsonify({"ok": True})

@api_bp.get("/auth/me")
@login_required
def api_me():
    if not current_user.is_authenticated:
        # LOGIN_DISABLED lets anonymous requests through
        return jsonify({"ok": True, "user": None})
    return jsonify({"ok": True, "user": {"id": current_user.id, "email": current_user.email,
                                         "role": current_user.role}})
