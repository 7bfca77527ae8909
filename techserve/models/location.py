from pydantic import Field
from typing import Optional
from uuid import UUID

from .common import CamelModel

class LocationUpsert(CamelModel):
    latitude: float = Field(..., ge=-90, le=90, examples=[-1.2921])
    longitude: float = Field(..., ge=-180, le=180, examples=[36.8219])
    address: str = Field(..., min_length=1, examples=["Moi Avenue, Nairobi"])

class LocationOut(LocationUpsert):
    technician_id: UUID

class NearestTechnicianRequest(CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    service_type: Optional[str] = None
