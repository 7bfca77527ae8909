# techserve/models/technician.py
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from uuid import UUID

from .common import CamelModel
from .kyc import FirebaseKycStatus, KycResultData, VerificationStatus

class AvailabilityStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    BUSY = "BUSY"
    OFFLINE = "OFFLINE"

class TechnicianCreate(CamelModel):
    username: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    category_id: int
    documents: str = Field(..., min_length=1, description="Path or URL of the uploaded identity document")

class TechnicianUpdate(CamelModel):
    username: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    category_id: Optional[int] = None
    documents: Optional[str] = Field(None, min_length=1)

class TechnicianAvailability(CamelModel):
    availability_status: AvailabilityStatus

class TechnicianOut(CamelModel):
    id: UUID
    username: str
    email: str
    category_id: Optional[int] = None
    documents: Optional[str] = None
    email_verified: bool = False
    verification_status: VerificationStatus
    firebase_kyc_status: FirebaseKycStatus
    firebase_kyc_data: Optional[KycResultData] = None
    admin_notes: Optional[str] = None
    availability_status: AvailabilityStatus
    version: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class TechnicianSummary(CamelModel):
    id: UUID
    username: str
    email: str
    category_id: Optional[int] = None
    verification_status: VerificationStatus
    availability_status: AvailabilityStatus
    created_at: Optional[datetime] = None

class CategoryRef(CamelModel):
    id: int
    name: str

class ServiceRef(CamelModel):
    id: int
    name: str
    price: float

class LocationRef(CamelModel):
    latitude: float
    longitude: float
    address: str

class TechnicianDetail(TechnicianOut):
    category: Optional[CategoryRef] = None
    services: List[ServiceRef] = []
    average_rating: float = 0
    rating_count: int = 0
    location: Optional[LocationRef] = None

class NearbyTechnician(CamelModel):
    id: UUID
    username: str
    email: str
    category_id: Optional[int] = None
    availability_status: AvailabilityStatus
    latitude: float
    longitude: float
    address: Optional[str] = None
    distance_km: float = Field(..., description="Distance from search location in km")

class TechnicianRegistered(BaseModel):
    message: str
    technician: TechnicianOut

class KycSubmissionResult(CamelModel):
    message: str
    technician: TechnicianOut
    requires_admin_review: bool

class KycDecisionResult(CamelModel):
    message: str
    technician: TechnicianOut

class NearestTechnicianResult(CamelModel):
    message: str
    technician: NearbyTechnician
    distance_km: float
    radius_km: float
