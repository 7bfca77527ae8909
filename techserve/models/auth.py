# techserve/models/auth.py
from enum import Enum
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from uuid import UUID

from .common import CamelModel

class Role(str, Enum):
    USER = "USER"
    TECHNICIAN = "TECHNICIAN"
    ADMIN = "ADMIN"

class Token(BaseModel):
    access_token: str
    token_type: str
    role: Role

class CurrentUser(BaseModel):
    id: UUID
    role: Role
    email: Optional[str] = None
    username: Optional[str] = None

class LoginRequest(BaseModel):
    username: str
    password: str

class ForgotPasswordRequest(BaseModel):
    email: EmailStr

class ResetPasswordRequest(CamelModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
