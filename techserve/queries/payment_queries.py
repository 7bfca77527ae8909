# techserve/queries/payment_queries.py
from typing import Optional, Dict, Any
import asyncpg

PAYMENT_COLUMNS = "id, appointment_id, transaction_id, amount, status, created_at, updated_at"

async def create_payment(
    conn: asyncpg.Connection,
    appointment_id: int,
    transaction_id: str,
    amount: float,
    status: str = "PENDING"
) -> Dict[str, Any]:
    """Create a new payment record"""
    row = await conn.fetchrow(
        f"""
        INSERT INTO payment (appointment_id, transaction_id, amount, status)
        VALUES ($1, $2, $3, $4)
        RETURNING {PAYMENT_COLUMNS}
        """,
        appointment_id, transaction_id, amount, status
    )
    return dict(row)

async def get_payment_by_id(
    conn: asyncpg.Connection,
    payment_id: int
) -> Optional[Dict[str, Any]]:
    """Get a payment together with the appointment's participants"""
    row = await conn.fetchrow(
        """
        SELECT p.id, p.appointment_id, p.transaction_id, p.amount, p.status,
               p.created_at, p.updated_at, a.client_id, a.technician_id
        FROM payment p
        JOIN appointment a ON a.id = p.appointment_id
        WHERE p.id = $1
        """,
        payment_id
    )
    return dict(row) if row else None

async def get_payment_by_transaction(
    conn: asyncpg.Connection,
    transaction_id: str
) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow(
        f"SELECT {PAYMENT_COLUMNS} FROM payment WHERE transaction_id = $1",
        transaction_id
    )
    return dict(row) if row else None

async def settle_payment(
    conn: asyncpg.Connection,
    transaction_id: str,
    status: str
) -> Optional[Dict[str, Any]]:
    """
    Move a PENDING payment to its final status. Returns None when the
    payment was already settled, so a re-delivered callback changes nothing.
    """
    row = await conn.fetchrow(
        f"""
        UPDATE payment
        SET status = $1, updated_at = NOW()
        WHERE transaction_id = $2 AND status = 'PENDING'
        RETURNING {PAYMENT_COLUMNS}
        """,
        status, transaction_id
    )
    return dict(row) if row else None
