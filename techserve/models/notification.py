from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, Dict, Optional

from .common import CamelModel

class NotificationOut(CamelModel):
    notification_id: int
    message: str = Field(..., max_length=500)
    is_read: bool = False
    created_at: datetime

class DeviceTokenRegister(CamelModel):
    token: str = Field(..., min_length=1)

class PushNotificationRequest(CamelModel):
    token: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    data: Dict[str, Any] = {}

class PushResult(BaseModel):
    success: bool
    token: str
    title: str
    body: str
    data: Optional[Dict[str, Any]] = None
