"""
Tests for location upserts and nearest-technician matching.
"""

from unittest.mock import AsyncMock
from uuid import uuid4

from techserve.config import settings
from techserve.models.auth import Role
from techserve.queries import location_queries


def nearby_row(**overrides):
    row = {
        "id": uuid4(),
        "username": "fundi",
        "email": "fundi@example.com",
        "category_id": 1,
        "availability_status": "AVAILABLE",
        "latitude": -1.2921,
        "longitude": 36.8219,
        "address": "Moi Avenue, Nairobi",
        "distance_km": 1.25,
    }
    row.update(overrides)
    return row


class TestNearest:
    async def test_nobody_in_range(self, client, conn):
        conn.fetch.return_value = []

        response = await client.post("/nearest-technicians/", json={"latitude": 0.0, "longitude": 0.0})

        assert response.status_code == 404
        assert response.json()["detail"] == "No technicians found within the search radius."

    async def test_query_uses_configured_radius_and_single_row(self, client, conn):
        conn.fetch.return_value = []

        await client.post("/nearest-technicians/", json={"latitude": -1.29, "longitude": 36.82})

        query, latitude, longitude, radius_km, service_type, limit = conn.fetch.await_args.args
        assert (latitude, longitude) == (-1.29, 36.82)
        assert radius_km == settings.nearest_technician_radius_km
        assert service_type is None
        assert limit == 1
        assert "ORDER BY distance_km ASC, t.id ASC" in query
        assert "t.verification_status = 'VERIFIED'" in query
        assert "t.availability_status = 'AVAILABLE'" in query

    async def test_returns_nearest(self, client, conn):
        row = nearby_row()
        conn.fetch.return_value = [row]

        response = await client.post(
            "/nearest-technicians/",
            json={"latitude": -1.29, "longitude": 36.82, "serviceType": "Plumbing"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["technician"]["id"] == str(row["id"])
        assert body["distanceKm"] == 1.25
        assert body["radiusKm"] == settings.nearest_technician_radius_km
        assert conn.fetch.await_args.args[4] == "Plumbing"

    async def test_rejects_impossible_coordinates(self, client):
        response = await client.post("/nearest-technicians/", json={"latitude": 91, "longitude": 0})

        assert response.status_code == 400


async def test_nearby_listing(client, conn):
    conn.fetch.return_value = [nearby_row(), nearby_row(distance_km=3.5)]

    response = await client.get(
        "/technicians/nearby", params={"latitude": -1.29, "longitude": 36.82, "radiusKm": 5}
    )

    assert response.status_code == 200
    assert [t["distanceKm"] for t in response.json()] == [1.25, 3.5]
    assert conn.fetch.await_args.args[3] == 5
    assert conn.fetch.await_args.args[5] is None


async def test_technician_sets_own_location(client, login_as, monkeypatch):
    technician = login_as(Role.TECHNICIAN)
    upsert = AsyncMock(return_value={
        "technician_id": technician.id, "latitude": -1.29, "longitude": 36.82, "address": "Nairobi"
    })
    monkeypatch.setattr(location_queries, "upsert_location", upsert)

    response = await client.post(
        "/locations/", json={"latitude": -1.29, "longitude": 36.82, "address": "Nairobi"}
    )

    assert response.status_code == 200
    assert response.json()["technicianId"] == str(technician.id)
    assert upsert.await_args.args[1:] == (technician.id, -1.29, 36.82, "Nairobi")


async def test_users_cannot_set_locations(client, login_as):
    login_as(Role.USER)

    response = await client.post(
        "/locations/", json={"latitude": -1.29, "longitude": 36.82, "address": "Nairobi"}
    )

    assert response.status_code == 403
