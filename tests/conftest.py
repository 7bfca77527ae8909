"""
Pytest configuration and fixtures.

The app is driven in-process through httpx's ASGI transport. The asyncpg
connection is a mock and query functions are patched per test.
"""

import os

os.environ.setdefault("DATABASE_USERNAME", "test")
os.environ.setdefault("DATABASE_PASSWORD", "test")
os.environ.setdefault("DATABASE_HOSTNAME", "localhost")
os.environ.setdefault("DATABASE_PORT", "5432")
os.environ.setdefault("DATABASE_NAME", "techserve_test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("MPESA_SIMULATE", "true")

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from techserve.database import get_db
from techserve.main import app
from techserve.models.auth import CurrentUser, Role
from techserve.utils.auth import get_current_user

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def conn():
    """Stand-in for the per-request asyncpg connection."""
    conn = MagicMock()
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchval = AsyncMock(return_value=0)
    conn.execute = AsyncMock(return_value="UPDATE 0")
    return conn


@pytest_asyncio.fixture
async def client(conn):
    async def override_get_db():
        yield conn

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def login_as():
    """Authenticate every following request as a fresh principal of the given role."""
    def _login(role: Role, user_id=None) -> CurrentUser:
        user = CurrentUser(
            id=user_id or uuid4(),
            role=role,
            email=f"{role.value.lower()}@example.com",
            username=role.value.lower(),
        )
        app.dependency_overrides[get_current_user] = lambda: user
        return user
    return _login


@pytest.fixture
def make_technician():
    def _make(**overrides) -> dict:
        row = {
            "id": uuid4(),
            "username": "fundi",
            "email": "fundi@example.com",
            "category_id": 1,
            "documents": "https://files.example.com/id.pdf",
            "email_verified": True,
            "verification_status": "PENDING",
            "firebase_kyc_status": "PENDING",
            "firebase_kyc_data": None,
            "admin_notes": None,
            "availability_status": "AVAILABLE",
            "version": 0,
            "created_at": NOW,
            "updated_at": NOW,
        }
        row.update(overrides)
        return row
    return _make


@pytest.fixture
def make_appointment():
    def _make(**overrides) -> dict:
        row = {
            "id": 1,
            "client_id": uuid4(),
            "technician_id": uuid4(),
            "service_type": "Plumbing",
            "appointment_date": NOW,
            "status": "PENDING",
            "created_at": NOW,
            "updated_at": NOW,
        }
        row.update(overrides)
        return row
    return _make


@pytest.fixture
def make_user():
    def _make(**overrides) -> dict:
        row = {
            "id": uuid4(),
            "username": "wanjiku",
            "email": "wanjiku@example.com",
            "is_verified": True,
            "role": "USER",
            "created_at": NOW,
            "updated_at": NOW,
        }
        row.update(overrides)
        return row
    return _make
