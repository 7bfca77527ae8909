# techserve/queries/location_queries.py
from typing import Optional, Dict, Any, List
import asyncpg

async def upsert_location(
    conn: asyncpg.Connection,
    technician_id: str,
    latitude: float,
    longitude: float,
    address: str
) -> Dict[str, Any]:
    """One location per technician; the PostGIS point is rebuilt on every write"""
    row = await conn.fetchrow(
        """
        INSERT INTO location (technician_id, latitude, longitude, address, coordinates)
        VALUES ($1, $2, $3, $4, ST_SetSRID(ST_MakePoint($3, $2), 4326)::geography)
        ON CONFLICT (technician_id)
        DO UPDATE SET latitude = EXCLUDED.latitude,
                      longitude = EXCLUDED.longitude,
                      address = EXCLUDED.address,
                      coordinates = EXCLUDED.coordinates
        RETURNING technician_id, latitude, longitude, address
        """,
        technician_id, latitude, longitude, address
    )
    return dict(row)

async def find_technicians_within(
    conn: asyncpg.Connection,
    latitude: float,
    longitude: float,
    radius_km: float,
    service_type: Optional[str] = None,
    limit: Optional[int] = None
) -> List[Dict[str, Any]]:
    """
    Available, verified technicians whose stored point lies within radius_km
    of (latitude, longitude), nearest first. Distance is measured on the
    geography type, so it is metres on the WGS84 spheroid.
    """
    rows = await conn.fetch(
        """
        WITH origin AS (
            SELECT ST_SetSRID(ST_MakePoint($2, $1), 4326)::geography AS point
        )
        SELECT
            t.id, t.username, t.email, t.category_id, t.availability_status,
            l.latitude, l.longitude, l.address,
            ST_Distance(l.coordinates, origin.point) / 1000.0 AS distance_km
        FROM technician t
        JOIN location l ON l.technician_id = t.id
        CROSS JOIN origin
        WHERE t.availability_status = 'AVAILABLE'
          AND t.verification_status = 'VERIFIED'
          AND ST_DWithin(l.coordinates, origin.point, $3::float8 * 1000.0)
          AND (
              $4::text IS NULL
              OR EXISTS (
                  SELECT 1 FROM service s
                  WHERE s.technician_id = t.id AND LOWER(TRIM(s.name)) = LOWER(TRIM($4::text))
              )
          )
        ORDER BY distance_km ASC, t.id ASC
        LIMIT $5
        """,
        latitude, longitude, radius_km, service_type, limit
    )
    return [dict(r) for r in rows]

async def find_nearest_technician(
    conn: asyncpg.Connection,
    latitude: float,
    longitude: float,
    radius_km: float,
    service_type: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    rows = await find_technicians_within(
        conn, latitude, longitude, radius_km, service_type=service_type, limit=1
    )
    return rows[0] if rows else None
