# techserve/queries/catalog_queries.py
from typing import Optional, Dict, Any, List
import asyncpg

SERVICE_COLUMNS = "id, name, price, technician_id, created_at, updated_at"

async def list_categories(conn: asyncpg.Connection) -> List[Dict[str, Any]]:
    rows = await conn.fetch("SELECT id, name FROM category ORDER BY name")
    return [dict(r) for r in rows]

async def get_category_by_name(conn: asyncpg.Connection, name: str) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow("SELECT id, name FROM category WHERE name = $1", name)
    return dict(row) if row else None

async def create_category(conn: asyncpg.Connection, name: str) -> Dict[str, Any]:
    row = await conn.fetchrow(
        "INSERT INTO category (name) VALUES ($1) RETURNING id, name",
        name
    )
    return dict(row)

async def list_services(conn: asyncpg.Connection, limit: int, offset: int) -> List[Dict[str, Any]]:
    rows = await conn.fetch(
        f"SELECT {SERVICE_COLUMNS} FROM service ORDER BY id LIMIT $1 OFFSET $2",
        limit, offset
    )
    return [dict(r) for r in rows]

async def count_services(conn: asyncpg.Connection) -> int:
    return await conn.fetchval("SELECT COUNT(*) FROM service")

async def get_service(conn: asyncpg.Connection, service_id: int) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow(f"SELECT {SERVICE_COLUMNS} FROM service WHERE id = $1", service_id)
    return dict(row) if row else None

async def create_service(
    conn: asyncpg.Connection,
    name: str,
    price: float,
    technician_id: str
) -> Dict[str, Any]:
    row = await conn.fetchrow(
        f"""
        INSERT INTO service (name, price, technician_id)
        VALUES ($1, $2, $3)
        RETURNING {SERVICE_COLUMNS}
        """,
        name, price, technician_id
    )
    return dict(row)

async def update_service(
    conn: asyncpg.Connection,
    service_id: int,
    name: Optional[str] = None,
    price: Optional[float] = None
) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow(
        f"""
        UPDATE service
        SET name = COALESCE($1, name),
            price = COALESCE($2, price),
            updated_at = NOW()
        WHERE id = $3
        RETURNING {SERVICE_COLUMNS}
        """,
        name, price, service_id
    )
    return dict(row) if row else None

async def delete_service(conn: asyncpg.Connection, service_id: int) -> bool:
    result = await conn.execute("DELETE FROM service WHERE id = $1", service_id)
    return result != "DELETE 0"
