from __future__ import annotations

import json

import bcrypt
import pytest
from fastapi.testclient import TestClient

from core.db import RecordStore

ADMIN_EMAIL = "admin@test.local"
ADMIN_PASSWORD = "admin-pass-123"
MANAGER_EMAIL = "manager@test.local"
MANAGER_PASSWORD = "manager-pass-123"


@pytest.fixture(scope="session")
def credential_entries() -> list[dict]:
    def quick_hash(password: str) -> str:
        # Low cost factor keeps the suite fast.
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")

    return [
        {"id": 1, "name": "Admin", "email": ADMIN_EMAIL, "password": quick_hash(ADMIN_PASSWORD), "role": "admin"},
        {"id": 2, "name": "Manager", "email": MANAGER_EMAIL, "password": quick_hash(MANAGER_PASSWORD), "role": "manager"},
    ]


@pytest.fixture
def data_env(tmp_path, monkeypatch, credential_entries):
    data_dir = tmp_path / "data"
    public_dir = tmp_path / "public"
    creds_file = tmp_path / "credentials.json"
    creds_file.write_text(json.dumps(credential_entries), encoding="utf-8")

    monkeypatch.setenv("DATA_DIR", str(data_dir))
    monkeypatch.setenv("PUBLIC_DIR", str(public_dir))
    monkeypatch.setenv("AUTH_CREDENTIALS_FILE", str(creds_file))
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.delenv("APP_ENV", raising=False)
    return {"data_dir": data_dir, "public_dir": public_dir}


@pytest.fixture
def store(data_env) -> RecordStore:
    store = RecordStore(data_env["data_dir"])
    store.ensure_layout()
    return store


@pytest.fixture
def client(data_env):
    from main import app

    with TestClient(app) as test_client:
        yield test_client


def login_token(client: TestClient, email: str, password: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    token = resp.cookies.get("auth_token")
    assert token
    client.cookies.clear()
    return token


@pytest.fixture
def admin_headers(client) -> dict[str, str]:
    return {"Authorization": f"Bearer {login_token(client, ADMIN_EMAIL, ADMIN_PASSWORD)}"}


@pytest.fixture
def manager_headers(client) -> dict[str, str]:
    return {"Authorization": f"Bearer {login_token(client, MANAGER_EMAIL, MANAGER_PASSWORD)}"}
