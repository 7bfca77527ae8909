from fastapi import APIRouter, Depends
import asyncpg

from ..database import get_db
from ..models.auth import CurrentUser, Role
from ..models.location import LocationOut, LocationUpsert
from ..queries import location_queries
from ..utils.auth import require_roles

location_router = APIRouter(prefix="/locations", tags=["Locations"])

@location_router.post("/", response_model=LocationOut)
async def upsert_location(
    location: LocationUpsert,
    current_user: CurrentUser = Depends(require_roles(Role.TECHNICIAN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await location_queries.upsert_location(
        conn, current_user.id, location.latitude, location.longitude, location.address
    )
