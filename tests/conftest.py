"""
pytest fixtures: one fresh app per test over a temporary SQLite file,
seeded with the bootstrap accounts and sample jobs.
"""

import pytest

from jobboard.app import create_app
from jobboard.db import SessionLocal

ADMIN = {"email": "admin@mail.com", "password": "admin"}
USER = {"email": "test@mail.com", "password": "testuser"}
SECRET = "test-secret"


def make_app(tmp_path, **overrides):
    config = {
        "TESTING": True,
        "DATABASE_URL": f"sqlite:///{tmp_path / 'test.db'}",
        "JWT_SECRET": SECRET,
        "BCRYPT_ROUNDS": 4,
        "RATELIMIT_ENABLED": False,
        "FRONTEND_DIST": str(tmp_path / "dist"),
        "BACKUP_DIR": str(tmp_path / "backups"),
        "BACKUP_INTERVAL_SECONDS": 0,
        "LOG_LEVEL": "WARNING",
    }
    config.update(overrides)
    return create_app(config)


@pytest.fixture
def app(tmp_path):
    return make_app(tmp_path)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    with SessionLocal() as s:
        yield s


def login(client, email, password):
    return client.post("/api/users/login", json={"email": email, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_token(client):
    resp = login(client, **ADMIN)
    assert resp.status_code == 200
    # rely on the header, not the cookie, unless a test says otherwise
    client.delete_cookie("token")
    return resp.get_json()["token"]


@pytest.fixture
def user_token(client):
    resp = login(client, **USER)
    assert resp.status_code == 200
    client.delete_cookie("token")
    return resp.get_json()["token"]


@pytest.fixture
def job_payload():
    return {
        "type": "Full-Time",
        "title": "Backend Engineer",
        "description": "Build and run the APIs behind our job board.",
        "salary": "$120K - $140K / Year",
        "location": "Remote",
        "company_name": "Acme Corp",
        "company_description": "Acme builds tools for hiring teams.",
        "contact_email": "hr@x.com",
        "contact_phone": "+1 (555) 010-2030",
    }
