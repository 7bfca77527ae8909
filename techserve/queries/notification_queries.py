# techserve/queries/notification_queries.py
from typing import Optional, Dict, Any, List
import asyncpg

async def create_notification(conn: asyncpg.Connection, recipient_id: str, message: str) -> None:
    await conn.execute(
        "INSERT INTO notification (message, recipient_id) VALUES ($1, $2)",
        message, recipient_id
    )

async def notify_all_admins(conn: asyncpg.Connection, message: str) -> int:
    """Fan a message out to every admin inbox; returns how many were written"""
    result = await conn.execute(
        """
        INSERT INTO notification (message, recipient_id)
        SELECT $1, id FROM app_user WHERE role = 'ADMIN'
        """,
        message
    )
    return int(result.split()[-1])

async def list_notifications(
    conn: asyncpg.Connection,
    recipient_id: str,
    status: str = "all"
) -> List[Dict[str, Any]]:
    query = """
        SELECT notification_id, message, created_at, is_read
        FROM notification
        WHERE recipient_id = $1
    """
    if status == "read":
        query += " AND is_read = true"
    elif status == "unread":
        query += " AND is_read = false"

    query += " ORDER BY created_at DESC"

    rows = await conn.fetch(query, recipient_id)
    return [dict(row) for row in rows]

async def count_unread(conn: asyncpg.Connection, recipient_id: str) -> int:
    return await conn.fetchval(
        """
        SELECT COUNT(*) FROM notification
        WHERE recipient_id = $1 AND is_read = false
        """,
        recipient_id
    )

async def mark_read(conn: asyncpg.Connection, notification_id: int, recipient_id: str) -> bool:
    result = await conn.execute(
        """
        UPDATE notification
        SET is_read = true
        WHERE notification_id = $1 AND recipient_id = $2
        """,
        notification_id, recipient_id
    )
    return result != "UPDATE 0"

async def mark_all_read(conn: asyncpg.Connection, recipient_id: str) -> None:
    await conn.execute(
        """
        UPDATE notification
        SET is_read = true
        WHERE recipient_id = $1 AND is_read = false
        """,
        recipient_id
    )

async def upsert_device_token(
    conn: asyncpg.Connection,
    token: str,
    owner_id: str,
    owner_role: str
) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow(
        """
        INSERT INTO device_token (token, owner_id, owner_role)
        VALUES ($1, $2, $3)
        ON CONFLICT (token)
        DO UPDATE SET owner_id = EXCLUDED.owner_id, owner_role = EXCLUDED.owner_role
        RETURNING id, token, owner_id, owner_role
        """,
        token, owner_id, owner_role
    )
    return dict(row) if row else None
