# techserve/models/payment.py
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum

from .common import CamelModel

class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

class PaymentCreate(CamelModel):
    appointment_id: int
    amount: float = Field(..., gt=0)
    phone_number: str = Field(..., min_length=1)

class PaymentOut(CamelModel):
    id: int
    appointment_id: int
    transaction_id: str
    amount: float
    status: PaymentStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class PaymentReceipt(BaseModel):
    message: str
    payment: PaymentOut

# Daraja posts PascalCase keys; these mirror the gateway's own naming.
class StkCallback(BaseModel):
    MerchantRequestID: Optional[str] = None
    CheckoutRequestID: str
    ResultCode: int
    ResultDesc: Optional[str] = None

class StkCallbackBody(BaseModel):
    stkCallback: StkCallback

class StkCallbackEnvelope(BaseModel):
    Body: StkCallbackBody
