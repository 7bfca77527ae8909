# techserve/queries/technician_queries.py
from typing import Optional, Dict, Any, List
import asyncpg

TECHNICIAN_COLUMNS = """
    t.id, t.username, t.email, t.category_id, t.documents, t.email_verified,
    t.verification_status, t.firebase_kyc_status, t.firebase_kyc_data,
    t.admin_notes, t.availability_status, t.version, t.created_at, t.updated_at
"""

async def create_technician(
    conn: asyncpg.Connection,
    username: str,
    email: str,
    password_hash: str,
    category_id: int,
    documents: str,
    verification_token: str
) -> Dict[str, Any]:
    """Create a technician; both verification fields start at PENDING"""
    row = await conn.fetchrow(
        f"""
        INSERT INTO technician AS t (
            username, email, password_hash, category_id, documents,
            verification_token, verification_status, firebase_kyc_status
        )
        VALUES ($1, $2, $3, $4, $5, $6, 'PENDING', 'PENDING')
        RETURNING {TECHNICIAN_COLUMNS}
        """,
        username, email, password_hash, category_id, documents, verification_token
    )
    return dict(row)

async def username_or_email_taken(
    conn: asyncpg.Connection,
    username: Optional[str],
    email: Optional[str],
    exclude_id: Optional[str] = None
) -> Optional[str]:
    row = await conn.fetchrow(
        """
        SELECT
            bool_or(username = $1) AS username_taken,
            bool_or(email = $2) AS email_taken
        FROM technician
        WHERE (username = $1 OR email = $2)
          AND ($3::uuid IS NULL OR id <> $3::uuid)
        """,
        username, email, exclude_id
    )
    if row and row["username_taken"]:
        return "username"
    if row and row["email_taken"]:
        return "email"
    return None

async def get_technician_by_id(
    conn: asyncpg.Connection,
    technician_id: str
) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow(
        f"SELECT {TECHNICIAN_COLUMNS} FROM technician t WHERE t.id = $1",
        technician_id
    )
    return dict(row) if row else None

async def get_technician_detail(
    conn: asyncpg.Connection,
    technician_id: str
) -> Optional[Dict[str, Any]]:
    """Technician with category, services, rating stats and location"""
    row = await conn.fetchrow(
        f"""
        SELECT
            {TECHNICIAN_COLUMNS},
            c.name AS category_name,
            l.latitude, l.longitude, l.address,
            (SELECT COALESCE(AVG(score), 0) FROM rating WHERE technician_id = t.id) AS average_rating,
            (SELECT COUNT(*) FROM rating WHERE technician_id = t.id) AS rating_count
        FROM technician t
        LEFT JOIN category c ON c.id = t.category_id
        LEFT JOIN location l ON l.technician_id = t.id
        WHERE t.id = $1
        """,
        technician_id
    )
    if not row:
        return None

    technician = dict(row)
    services = await conn.fetch(
        "SELECT id, name, price FROM service WHERE technician_id = $1 ORDER BY id",
        technician_id
    )
    category_name = technician.pop("category_name")
    latitude = technician.pop("latitude")
    longitude = technician.pop("longitude")
    address = technician.pop("address")
    technician["category"] = (
        {"id": technician["category_id"], "name": category_name} if category_name else None
    )
    technician["location"] = (
        {"latitude": latitude, "longitude": longitude, "address": address}
        if latitude is not None else None
    )
    technician["services"] = [dict(s) for s in services]
    technician["average_rating"] = round(float(technician["average_rating"]), 2)
    return technician

async def get_technician_credentials(
    conn: asyncpg.Connection,
    username: str
) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow(
        "SELECT id, username, email, password_hash, email_verified FROM technician WHERE username = $1",
        username
    )
    return dict(row) if row else None

async def consume_verification_token(conn: asyncpg.Connection, token: str) -> bool:
    result = await conn.execute(
        """
        UPDATE technician
        SET email_verified = TRUE, verification_token = NULL, updated_at = NOW()
        WHERE verification_token = $1 AND email_verified = FALSE
        """,
        token
    )
    return result != "UPDATE 0"

async def list_technicians(
    conn: asyncpg.Connection,
    limit: int,
    offset: int,
    verification_status: Optional[str] = None
) -> List[Dict[str, Any]]:
    rows = await conn.fetch(
        f"""
        SELECT {TECHNICIAN_COLUMNS}
        FROM technician t
        WHERE ($1::text IS NULL OR t.verification_status = $1)
        ORDER BY t.created_at DESC
        LIMIT $2 OFFSET $3
        """,
        verification_status, limit, offset
    )
    return [dict(r) for r in rows]

async def count_technicians(
    conn: asyncpg.Connection,
    verification_status: Optional[str] = None
) -> int:
    return await conn.fetchval(
        "SELECT COUNT(*) FROM technician WHERE ($1::text IS NULL OR verification_status = $1)",
        verification_status
    )

async def update_technician(
    conn: asyncpg.Connection,
    technician_id: str,
    username: Optional[str] = None,
    email: Optional[str] = None,
    password_hash: Optional[str] = None,
    category_id: Optional[int] = None,
    documents: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    """
    Partial update. A new document restarts verification: both status
    fields go back to PENDING.
    """
    row = await conn.fetchrow(
        f"""
        UPDATE technician AS t
        SET username = COALESCE($1, username),
            email = COALESCE($2, email),
            password_hash = COALESCE($3, password_hash),
            category_id = COALESCE($4, category_id),
            documents = COALESCE($5, documents),
            verification_status = CASE WHEN $5::text IS NULL THEN verification_status ELSE 'PENDING' END,
            firebase_kyc_status = CASE WHEN $5::text IS NULL THEN firebase_kyc_status ELSE 'PENDING' END,
            version = CASE WHEN $5::text IS NULL THEN version ELSE version + 1 END,
            updated_at = NOW()
        WHERE id = $6
        RETURNING {TECHNICIAN_COLUMNS}
        """,
        username, email, password_hash, category_id, documents, technician_id
    )
    return dict(row) if row else None

async def update_availability(
    conn: asyncpg.Connection,
    technician_id: str,
    availability_status: str
) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow(
        f"""
        UPDATE technician AS t
        SET availability_status = $1, updated_at = NOW()
        WHERE id = $2
        RETURNING {TECHNICIAN_COLUMNS}
        """,
        availability_status, technician_id
    )
    return dict(row) if row else None

async def delete_technician(conn: asyncpg.Connection, technician_id: str) -> bool:
    result = await conn.execute("DELETE FROM technician WHERE id = $1", technician_id)
    return result != "DELETE 0"

async def category_exists(conn: asyncpg.Connection, category_id: int) -> bool:
    return bool(await conn.fetchval("SELECT 1 FROM category WHERE id = $1", category_id))
