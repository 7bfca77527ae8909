# techserve/models/catalog.py
from datetime import datetime
from pydantic import Field, field_validator
from typing import Optional
from uuid import UUID

from .common import CamelModel

class CategoryCreate(CamelModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v

class CategoryOut(CamelModel):
    id: int
    name: str

class ServiceCreate(CamelModel):
    name: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    technician_id: UUID

class ServiceUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, gt=0)

class ServiceOut(CamelModel):
    id: int
    name: str
    price: float
    technician_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
