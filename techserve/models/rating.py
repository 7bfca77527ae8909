from typing import List, Optional
from pydantic import Field
from datetime import datetime
from uuid import UUID

from .common import CamelModel

class RatingCreate(CamelModel):
    score: int = Field(..., ge=1, le=5, description="Score between 1 and 5")
    comment: Optional[str] = None
    technician_id: UUID

class RatingOut(CamelModel):
    id: int
    score: int
    comment: Optional[str]
    technician_id: UUID
    user_id: UUID
    created_at: Optional[datetime] = None

class TechnicianRatings(CamelModel):
    average_score: float
    total: int
    ratings: List[RatingOut]
