# tests/conftest.py
import os

###############
# 0) Environment before the app is imported (settings are read once)
###############
os.environ["APP_ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from clinic_api.config.settings import settings

API = settings.api_prefix

VALID_PATIENT = {
    "name": "Asha Verma",
    "aadharNo": "123456789012",
    "contactNo": "9876543210",
    "doctorName": "Dr. Rao",
}


@pytest.fixture
def client(tmp_path, monkeypatch):
    """A TestClient bound to a fresh SQLite database for every test."""
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'clinic.db'}")
    monkeypatch.setattr(settings, "create_tables", True)

    from clinic_api.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    """Register an account and return the parsed response body."""
    def _register(email="admin@mcvk.org", role="admin", password="secret123", name="Clinic Admin"):
        r = client.post(
            f"{API}/auth/register",
            json={"name": name, "email": email, "password": password, "role": role},
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _register


@pytest.fixture
def admin_headers(register):
    body = register()
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def user_headers(register):
    body = register(email="staff@mcvk.org", role="user", name="Front Desk")
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def create_patient(client, admin_headers):
    def _create(**overrides):
        payload = {**VALID_PATIENT, **overrides}
        r = client.post(f"{API}/patients", json=payload, headers=admin_headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _create
