import os
import shutil
import tempfile
from pathlib import Path

import pytest

# Settings are read at import time, so the environment must be ready first
_TMP = Path(tempfile.mkdtemp(prefix="tourdesk-tests-"))
os.environ.update(
    DATABASE_URL=f"sqlite+aiosqlite:///{_TMP / 'test.db'}",
    CACHE_ENABLED="false",
    UPLOAD_DIR=str(_TMP / "uploads"),
    SECRET_KEY="test-secret",
    ADMIN_EMAIL="admin@tourdesk.com",
    ADMIN_PASSWORD="admin-pass",
    LOCALE="ru",
    CURRENCY="EUR",
)

from fastapi.testclient import TestClient  # noqa: E402

from tourdesk.main import app  # noqa: E402

UPLOAD_DIR = _TMP / "uploads"


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_TMP, ignore_errors=True)


@pytest.fixture
def client():
    (_TMP / "test.db").unlink(missing_ok=True)
    shutil.rmtree(UPLOAD_DIR / "tours", ignore_errors=True)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    resp = client.post("/api/auth/login", json={"email": "admin@tourdesk.com", "password": "admin-pass"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def make_tour(client, auth_headers):
    def _make(**fields):
        data = {"title": "Alps", "price": "1250", "status": "active", **fields}
        resp = client.post("/api/tours", data=data, headers=auth_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["id"]

    return _make
