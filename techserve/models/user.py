# techserve/models/user.py
from datetime import datetime
from pydantic import EmailStr, Field
from typing import Optional
from uuid import UUID

from .auth import Role
from .common import CamelModel

class UserCreate(CamelModel):
    username: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)

class UserUpdate(CamelModel):
    username: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)

class UserOut(CamelModel):
    id: UUID
    username: str
    email: str
    is_verified: bool
    role: Role
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
