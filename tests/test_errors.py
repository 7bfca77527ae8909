"""
Tests for the application-wide error responses and pagination helpers.
"""

from unittest.mock import AsyncMock

import asyncpg
from httpx import ASGITransport, AsyncClient

from techserve.database import get_db
from techserve.main import app
from techserve.queries import catalog_queries
from techserve.utils.models import PaginationParams, page_of


async def test_health_check(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_unhandled_error_is_opaque(conn, monkeypatch):
    async def override_get_db():
        yield conn

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(catalog_queries, "list_categories", AsyncMock(side_effect=RuntimeError("boom")))
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/categories/")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
    assert "boom" not in response.text


async def test_foreign_key_violation_is_bad_request(client, monkeypatch):
    monkeypatch.setattr(
        catalog_queries,
        "list_categories",
        AsyncMock(side_effect=asyncpg.ForeignKeyViolationError("violates foreign key constraint")),
    )

    response = await client.get("/categories/")

    assert response.status_code == 400


async def test_malformed_json_is_bad_request(client):
    response = await client.post(
        "/users/", content="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Validation failed"


def test_page_of():
    params = PaginationParams(page=2, limit=2)

    page = page_of(["c", "d"], 5, params)

    assert params.offset == 2
    assert page == {"items": ["c", "d"], "total": 5, "page": 2, "page_size": 2}
