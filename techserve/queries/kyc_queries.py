# techserve/queries/kyc_queries.py
from typing import Optional, Dict, Any, List
import asyncpg

from .technician_queries import TECHNICIAN_COLUMNS

REVIEWABLE_KYC_STATUSES = ["FIREBASE_VERIFIED", "FIREBASE_REJECTED"]

async def record_kyc_result(
    conn: asyncpg.Connection,
    technician_id: str,
    firebase_kyc_status: str,
    firebase_kyc_data: Dict[str, Any],
    verification_status: str
) -> Optional[Dict[str, Any]]:
    """
    Store the upstream check outcome and the resulting verification status.
    Only a technician still PENDING is touched; None means no row was updated.
    """
    row = await conn.fetchrow(
        f"""
        UPDATE technician AS t
        SET firebase_kyc_status = $1,
            firebase_kyc_data = $2::jsonb,
            verification_status = $3,
            version = version + 1,
            updated_at = NOW()
        WHERE id = $4
          AND verification_status = 'PENDING'
        RETURNING {TECHNICIAN_COLUMNS}
        """,
        firebase_kyc_status, firebase_kyc_data, verification_status, technician_id
    )
    return dict(row) if row else None

async def record_admin_decision(
    conn: asyncpg.Connection,
    technician_id: str,
    verification_status: str,
    admin_notes: Optional[str],
    expected_version: Optional[int] = None
) -> Optional[Dict[str, Any]]:
    """
    Write the admin's final status. With expected_version set the row is only
    touched while its version still matches; None means no row was updated.
    """
    row = await conn.fetchrow(
        f"""
        UPDATE technician AS t
        SET verification_status = $1,
            admin_notes = $2,
            version = version + 1,
            updated_at = NOW()
        WHERE id = $3
          AND ($4::int IS NULL OR version = $4::int)
        RETURNING {TECHNICIAN_COLUMNS}
        """,
        verification_status, admin_notes, technician_id, expected_version
    )
    return dict(row) if row else None

async def list_pending_review(
    conn: asyncpg.Connection,
    limit: int,
    offset: int
) -> List[Dict[str, Any]]:
    rows = await conn.fetch(
        """
        SELECT
            t.id, t.username, t.email, t.firebase_kyc_status, t.firebase_kyc_data,
            t.verification_status, t.created_at, t.category_id,
            c.name AS category_name
        FROM technician t
        LEFT JOIN category c ON c.id = t.category_id
        WHERE t.firebase_kyc_status = ANY($1::text[])
          AND t.verification_status = 'PENDING'
        ORDER BY t.created_at DESC
        LIMIT $2 OFFSET $3
        """,
        REVIEWABLE_KYC_STATUSES, limit, offset
    )
    return [dict(r) for r in rows]

async def count_pending_review(conn: asyncpg.Connection) -> int:
    return await conn.fetchval(
        """
        SELECT COUNT(*) FROM technician
        WHERE firebase_kyc_status = ANY($1::text[])
          AND verification_status = 'PENDING'
        """,
        REVIEWABLE_KYC_STATUSES
    )

async def status_counts(conn: asyncpg.Connection) -> List[Dict[str, Any]]:
    """One row per (firebase_kyc_status, verification_status) pair present"""
    rows = await conn.fetch(
        """
        SELECT firebase_kyc_status, verification_status, COUNT(*) AS count
        FROM technician
        GROUP BY firebase_kyc_status, verification_status
        """
    )
    return [dict(r) for r in rows]
