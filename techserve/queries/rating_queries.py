# techserve/queries/rating_queries.py
from typing import Optional, Dict, Any
import asyncpg

async def create_rating(
    conn: asyncpg.Connection,
    score: int,
    comment: Optional[str],
    technician_id: str,
    user_id: str
) -> Dict[str, Any]:
    """Create a new rating"""
    row = await conn.fetchrow(
        """
        INSERT INTO rating (score, comment, technician_id, user_id)
        VALUES ($1, $2, $3, $4)
        RETURNING id, score, comment, technician_id, user_id, created_at
        """,
        score, comment, technician_id, user_id
    )
    return dict(row)

async def get_technician_ratings(
    conn: asyncpg.Connection,
    technician_id: str
) -> Dict[str, Any]:
    """Get all ratings for a technician with stats"""
    ratings = await conn.fetch(
        """
        SELECT id, score, comment, technician_id, user_id, created_at
        FROM rating
        WHERE technician_id = $1
        ORDER BY created_at DESC
        """,
        technician_id
    )

    avg_score = await conn.fetchval(
        """
        SELECT COALESCE(AVG(score), 0)
        FROM rating
        WHERE technician_id = $1
        """,
        technician_id
    )

    return {
        "average_score": round(float(avg_score), 2),
        "total": len(ratings),
        "ratings": [dict(r) for r in ratings]
    }
