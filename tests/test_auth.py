from __future__ import annotations
import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from extensions import db
from models import User

@pytest.fixture()
def client_app():
    app = create_app("test")
    app.config.update(
        LOGIN_DISABLED=False,
        AUTH_RL_MAX=3, AUTH_RL_WINDOW=60,  # tight limit for the test
    )
    with app.app_context():
        db.create_all()
        db.session.add_all([
            User(email="admin@example.com", password_hash=generate_password_hash("adminpass"),
                 role="ADMIN", is_active_flag=True),
            User(email="counselor@example.com", password_hash=generate_password_hash("counselpass"),
                 role="COUNSELOR", is_active_flag=True),
            User(email="gone@example.com", password_hash=generate_password_hash("gonepass"),
                 role="COUNSELOR", is_active_flag=False),
        ])
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture()
def auth_client(client_app):
    return client_app.test_client()

def test_protected_route_needs_login(auth_client):
    r = auth_client.get("/api/v1/courses")
    assert r.status_code == 401
    assert r.get_json()["errors"][0]["code"] == "UNAUTHORIZED"

def test_login_success_and_me(auth_client):
    r = auth_client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": "adminpass"})
    assert r.status_code == 200
    js = r.get_json()
    assert js["ok"] is True and js["user"]["role"] == "ADMIN"

    r2 = auth_client.get("/api/v1/auth/me")
    assert r2.status_code == 200
    assert r2.get_json()["user"]["email"] == "admin@example.com"
    assert auth_client.get("/api/v1/courses").status_code == 200

def test_wrong_password(auth_client):
    r = auth_client.post("/api/v1/auth/login", json={"email": "counselor@example.com", "password": "nope"})
    assert r.status_code == 401
    assert r.get_json()["errors"][0]["code"] == "INVALID_CREDENTIALS"

def test_missing_credentials(auth_client):
    r = auth_client.post("/api/v1/auth/login", json={"email": ""})
    assert r.status_code == 400

def test_inactive_user(auth_client):
    r = auth_client.post("/api/v1/auth/login", json={"email": "gone@example.com", "password": "gonepass"})
    assert r.status_code == 403

def test_rate_limit_login(auth_client):
    for _ in range(3):  # AUTH_RL_MAX
        auth_client.post("/api/v1/auth/login", json={"email": "ratelimit@example.com", "password": "wrong"})
    r = auth_client.post("/api/v1/auth/login", json={"email": "ratelimit@example.com", "password": "wrong"})
    assert r.status_code == 429

def test_logout(auth_client):
    r = auth_client.post("/api/v1/auth/login", json={"email": "counselor@example.com", "password": "counselpass"})
    assert r.status_code == 200
    r2 = auth_client.post("/api/v1/auth/logout")
    assert r2.status_code == 200
    assert auth_client.get("/api/v1/auth/me").status_code == 401
