# techserve/queries/admin_queries.py
from typing import Dict, Any
import asyncpg

async def _grouped(conn: asyncpg.Connection, table: str, column: str) -> Dict[str, int]:
    rows = await conn.fetch(f"SELECT {column} AS key, COUNT(*) AS count FROM {table} GROUP BY {column}")
    return {r["key"]: r["count"] for r in rows}

async def dashboard_stats(conn: asyncpg.Connection) -> Dict[str, Any]:
    """Counts for the admin overview, all derived from live tables"""
    total_users = await conn.fetchval("SELECT COUNT(*) FROM app_user")
    total_technicians = await conn.fetchval("SELECT COUNT(*) FROM technician")
    revenue = await conn.fetchval(
        "SELECT COALESCE(SUM(amount), 0) FROM payment WHERE status = 'COMPLETED'"
    )
    return {
        "total_users": total_users,
        "total_technicians": total_technicians,
        "technicians_by_verification": await _grouped(conn, "technician", "verification_status"),
        "appointments_by_status": await _grouped(conn, "appointment", "status"),
        "payments_by_status": await _grouped(conn, "payment", "status"),
        "completed_revenue": float(revenue)
    }
