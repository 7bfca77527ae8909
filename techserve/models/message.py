from datetime import datetime
from pydantic import Field
from typing import Optional
from uuid import UUID

from .auth import Role
from .common import CamelModel

class MessageCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=2000)

class MessageOut(CamelModel):
    id: int
    appointment_id: int
    sender_id: UUID
    sender_role: Role
    content: str
    sent_at: Optional[datetime] = None
