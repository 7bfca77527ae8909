from fastapi import APIRouter, Depends, HTTPException, status
from uuid import UUID
import asyncpg

from ..database import get_db
from ..models.auth import CurrentUser, Role
from ..models.rating import RatingCreate, RatingOut, TechnicianRatings
from ..queries import rating_queries, technician_queries
from ..utils.auth import require_roles

ratings_router = APIRouter(prefix="/ratings", tags=["Ratings"])

@ratings_router.post("/", response_model=RatingOut, status_code=status.HTTP_201_CREATED)
async def create_rating(
    payload: RatingCreate,
    current_user: CurrentUser = Depends(require_roles(Role.USER)),
    conn: asyncpg.Connection = Depends(get_db)
):
    if not await technician_queries.get_technician_by_id(conn, payload.technician_id):
        raise HTTPException(status_code=404, detail="Technician not found")
    return await rating_queries.create_rating(
        conn, payload.score, payload.comment, payload.technician_id, current_user.id
    )

@ratings_router.get("/technician/{technician_id}", response_model=TechnicianRatings)
async def get_technician_ratings(
    technician_id: UUID,
    conn: asyncpg.Connection = Depends(get_db)
):
    if not await technician_queries.get_technician_by_id(conn, technician_id):
        raise HTTPException(status_code=404, detail="Technician not found")
    return await rating_queries.get_technician_ratings(conn, technician_id)

__all__ = ["ratings_router"]
