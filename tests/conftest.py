# tests/conftest.py
import asyncio
import os
import sys
import tempfile
from datetime import date
from pathlib import Path

import pytest
import pytest_asyncio

# Project root is one level up from here.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read at import time, so the environment must be ready first.
_DB_DIR = tempfile.mkdtemp(prefix="meditrack-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["ENABLE_FILE_LOGGING"] = "false"
os.environ["ENABLE_REQUEST_LOGGING"] = "false"
os.environ["SESSION_COOKIE_SECURE"] = "false"
os.environ["RESPECT_MEDICATION_DATES"] = "false"
os.environ["TIMEZONE"] = "UTC"

from fastapi.testclient import TestClient  # noqa: E402

from core.database import AsyncSessionLocal, create_all, drop_all  # noqa: E402

TODAY = date(2026, 10, 18)
PASSWORD = "correct-horse"


def _reset_db():
    asyncio.run(drop_all())
    asyncio.run(create_all())


@pytest.fixture
def app():
    from main import app as fastapi_app
    from api.deps import get_today

    fastapi_app.dependency_overrides[get_today] = lambda: TODAY
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    _reset_db()
    with TestClient(app) as c:
        yield c


def register(client, email="alice@example.com", password=PASSWORD):
    return client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "confirm_password": password},
    )


@pytest.fixture
def auth_client(client):
    """A client holding the session cookie of a freshly registered user."""
    resp = register(client)
    assert resp.status_code == 201, resp.text
    return client


def add_medication(client, **overrides):
    payload = {
        "name": "Lisinopril",
        "dosage": 10,
        "unit": "mg",
        "times": ["08:00", "20:00"],
        "start_date": "2026-10-01",
        "is_ongoing": True,
    }
    payload.update(overrides)
    resp = client.post("/api/v1/medications", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest_asyncio.fixture
async def db_session():
    await drop_all()
    await create_all()
    async with AsyncSessionLocal() as session:
        yield session
