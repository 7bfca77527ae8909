# techserve/routes/nearest.py
from fastapi import APIRouter, Depends, HTTPException
import asyncpg
import logging

from ..config import settings
from ..database import get_db
from ..models.location import NearestTechnicianRequest
from ..models.technician import NearestTechnicianResult
from ..queries import location_queries

nearest_router = APIRouter(prefix="/nearest-technicians", tags=["Nearest Technician"])
logger = logging.getLogger(__name__)

@nearest_router.post("/", response_model=NearestTechnicianResult)
async def find_nearest_technician(
    payload: NearestTechnicianRequest,
    conn: asyncpg.Connection = Depends(get_db)
):
    radius_km = settings.nearest_technician_radius_km
    technician = await location_queries.find_nearest_technician(
        conn,
        payload.latitude,
        payload.longitude,
        radius_km,
        service_type=payload.service_type
    )
    if not technician:
        raise HTTPException(status_code=404, detail="No technicians found within the search radius.")

    logger.info(
        f"Nearest technician to ({payload.latitude}, {payload.longitude}) is "
        f"{technician['id']} at {technician['distance_km']:.2f} km"
    )
    return {
        "message": "Nearest technician found",
        "technician": technician,
        "distance_km": technician["distance_km"],
        "radius_km": radius_km
    }

__all__ = ["nearest_router"]
