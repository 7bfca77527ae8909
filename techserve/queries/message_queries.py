# techserve/queries/message_queries.py
from typing import Dict, Any, List
import asyncpg

async def list_messages(
    conn: asyncpg.Connection,
    appointment_id: int,
    limit: int,
    offset: int
) -> List[Dict[str, Any]]:
    rows = await conn.fetch(
        """
        SELECT id, appointment_id, sender_id, sender_role, content, sent_at
        FROM message
        WHERE appointment_id = $1
        ORDER BY sent_at ASC, id ASC
        LIMIT $2 OFFSET $3
        """,
        appointment_id, limit, offset
    )
    return [dict(r) for r in rows]

async def count_messages(conn: asyncpg.Connection, appointment_id: int) -> int:
    return await conn.fetchval(
        "SELECT COUNT(*) FROM message WHERE appointment_id = $1",
        appointment_id
    )

async def create_message(
    conn: asyncpg.Connection,
    appointment_id: int,
    sender_id: str,
    sender_role: str,
    content: str
) -> Dict[str, Any]:
    row = await conn.fetchrow(
        """
        INSERT INTO message (appointment_id, sender_id, sender_role, content)
        VALUES ($1, $2, $3, $4)
        RETURNING id, appointment_id, sender_id, sender_role, content, sent_at
        """,
        appointment_id, sender_id, sender_role, content
    )
    return dict(row)
