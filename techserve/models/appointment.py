# techserve/models/appointment.py
from pydantic import Field
from datetime import datetime
from typing import Optional
from enum import Enum
from uuid import UUID

from .common import CamelModel

class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

class AppointmentCreate(CamelModel):
    technician_id: UUID
    service_type: str = Field(..., min_length=1)
    appointment_date: datetime

class AppointmentUpdate(CamelModel):
    service_type: Optional[str] = Field(None, min_length=1)
    appointment_date: Optional[datetime] = None
    status: Optional[AppointmentStatus] = None

class AppointmentOut(CamelModel):
    id: int
    client_id: UUID
    technician_id: UUID
    service_type: str
    appointment_date: datetime
    status: AppointmentStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class AppointmentWithParty(AppointmentOut):
    client_username: Optional[str] = None
    technician_username: Optional[str] = None
