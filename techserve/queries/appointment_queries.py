# techserve/queries/appointment_queries.py
from datetime import datetime
from typing import Optional, Dict, Any, List
import asyncpg

APPOINTMENT_COLUMNS = """
    a.id, a.client_id, a.technician_id, a.service_type, a.appointment_date,
    a.status, a.created_at, a.updated_at
"""

async def create_appointment(
    conn: asyncpg.Connection,
    client_id: str,
    technician_id: str,
    service_type: str,
    appointment_date: datetime
) -> Dict[str, Any]:
    """Create a new appointment in PENDING state"""
    row = await conn.fetchrow(
        f"""
        INSERT INTO appointment AS a (client_id, technician_id, service_type, appointment_date)
        VALUES ($1, $2, $3, $4)
        RETURNING {APPOINTMENT_COLUMNS}
        """,
        client_id, technician_id, service_type, appointment_date
    )
    return dict(row)

async def get_appointment(conn: asyncpg.Connection, appointment_id: int) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow(
        f"SELECT {APPOINTMENT_COLUMNS} FROM appointment a WHERE a.id = $1",
        appointment_id
    )
    return dict(row) if row else None

async def get_client_appointments(
    conn: asyncpg.Connection,
    client_id: str,
    limit: int,
    offset: int
) -> List[Dict[str, Any]]:
    rows = await conn.fetch(
        f"""
        SELECT {APPOINTMENT_COLUMNS}, t.username AS technician_username
        FROM appointment a
        JOIN technician t ON t.id = a.technician_id
        WHERE a.client_id = $1
        ORDER BY a.appointment_date DESC, a.id DESC
        LIMIT $2 OFFSET $3
        """,
        client_id, limit, offset
    )
    return [dict(r) for r in rows]

async def count_client_appointments(conn: asyncpg.Connection, client_id: str) -> int:
    return await conn.fetchval("SELECT COUNT(*) FROM appointment WHERE client_id = $1", client_id)

async def get_technician_appointments(
    conn: asyncpg.Connection,
    technician_id: str,
    limit: int,
    offset: int
) -> List[Dict[str, Any]]:
    rows = await conn.fetch(
        f"""
        SELECT {APPOINTMENT_COLUMNS}, u.username AS client_username
        FROM appointment a
        JOIN app_user u ON u.id = a.client_id
        WHERE a.technician_id = $1
        ORDER BY a.appointment_date DESC, a.id DESC
        LIMIT $2 OFFSET $3
        """,
        technician_id, limit, offset
    )
    return [dict(r) for r in rows]

async def count_technician_appointments(conn: asyncpg.Connection, technician_id: str) -> int:
    return await conn.fetchval(
        "SELECT COUNT(*) FROM appointment WHERE technician_id = $1", technician_id
    )

async def update_appointment(
    conn: asyncpg.Connection,
    appointment_id: int,
    service_type: Optional[str] = None,
    appointment_date: Optional[datetime] = None,
    status: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow(
        f"""
        UPDATE appointment AS a
        SET service_type = COALESCE($1, service_type),
            appointment_date = COALESCE($2, appointment_date),
            status = COALESCE($3, status),
            updated_at = NOW()
        WHERE id = $4
        RETURNING {APPOINTMENT_COLUMNS}
        """,
        service_type, appointment_date, status, appointment_id
    )
    return dict(row) if row else None

async def delete_appointment(conn: asyncpg.Connection, appointment_id: int) -> bool:
    result = await conn.execute("DELETE FROM appointment WHERE id = $1", appointment_id)
    return result != "DELETE 0"
