# techserve/queries/user_queries.py
from datetime import datetime
from typing import Optional, Dict, Any, List
import asyncpg

USER_COLUMNS = "id, username, email, is_verified, role, created_at, updated_at"

async def create_user(
    conn: asyncpg.Connection,
    username: str,
    email: str,
    password_hash: str,
    verification_token: str
) -> Dict[str, Any]:
    """Create an unverified user"""
    row = await conn.fetchrow(
        f"""
        INSERT INTO app_user (username, email, password_hash, verification_token)
        VALUES ($1, $2, $3, $4)
        RETURNING {USER_COLUMNS}
        """,
        username, email, password_hash, verification_token
    )
    return dict(row)

async def username_or_email_taken(
    conn: asyncpg.Connection,
    username: Optional[str],
    email: Optional[str],
    exclude_id: Optional[str] = None
) -> Optional[str]:
    """Return which unique field ('username' or 'email') is already in use"""
    row = await conn.fetchrow(
        """
        SELECT
            bool_or(username = $1) AS username_taken,
            bool_or(email = $2) AS email_taken
        FROM app_user
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

async def get_user_by_id(conn: asyncpg.Connection, user_id: str) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow(f"SELECT {USER_COLUMNS} FROM app_user WHERE id = $1", user_id)
    return dict(row) if row else None

async def get_user_credentials(conn: asyncpg.Connection, username: str) -> Optional[Dict[str, Any]]:
    """Row including password_hash, for login"""
    row = await conn.fetchrow(
        "SELECT id, username, email, password_hash, is_verified, role FROM app_user WHERE username = $1",
        username
    )
    return dict(row) if row else None

async def get_user_by_email(conn: asyncpg.Connection, email: str) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow(f"SELECT {USER_COLUMNS} FROM app_user WHERE email = $1", email)
    return dict(row) if row else None

async def consume_verification_token(conn: asyncpg.Connection, token: str) -> bool:
    """Mark the holder of an unused token as verified; False if nobody holds it"""
    result = await conn.execute(
        """
        UPDATE app_user
        SET is_verified = TRUE, verification_token = NULL, updated_at = NOW()
        WHERE verification_token = $1 AND is_verified = FALSE
        """,
        token
    )
    return result != "UPDATE 0"

async def update_user(
    conn: asyncpg.Connection,
    user_id: str,
    username: Optional[str] = None,
    email: Optional[str] = None,
    password_hash: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    row = await conn.fetchrow(
        f"""
        UPDATE app_user
        SET username = COALESCE($1, username),
            email = COALESCE($2, email),
            password_hash = COALESCE($3, password_hash),
            updated_at = NOW()
        WHERE id = $4
        RETURNING {USER_COLUMNS}
        """,
        username, email, password_hash, user_id
    )
    return dict(row) if row else None

async def delete_user(conn: asyncpg.Connection, user_id: str) -> bool:
    result = await conn.execute("DELETE FROM app_user WHERE id = $1", user_id)
    return result != "DELETE 0"

async def list_users(conn: asyncpg.Connection, limit: int, offset: int) -> List[Dict[str, Any]]:
    rows = await conn.fetch(
        f"SELECT {USER_COLUMNS} FROM app_user ORDER BY created_at DESC LIMIT $1 OFFSET $2",
        limit, offset
    )
    return [dict(r) for r in rows]

async def count_users(conn: asyncpg.Connection) -> int:
    return await conn.fetchval("SELECT COUNT(*) FROM app_user")

async def set_reset_token(
    conn: asyncpg.Connection,
    email: str,
    token: str,
    expires_at: datetime
) -> None:
    await conn.execute(
        """
        UPDATE app_user
        SET reset_password_token = $1, reset_password_expires = $2
        WHERE email = $3
        """,
        token, expires_at, email
    )

async def reset_password(conn: asyncpg.Connection, token: str, password_hash: str) -> bool:
    """Swap the password for the holder of an unexpired reset token"""
    result = await conn.execute(
        """
        UPDATE app_user
        SET password_hash = $1,
            reset_password_token = NULL,
            reset_password_expires = NULL,
            updated_at = NOW()
        WHERE reset_password_token = $2 AND reset_password_expires >= NOW()
        """,
        password_hash, token
    )
    return result != "UPDATE 0"
