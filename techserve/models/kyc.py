# techserve/models/kyc.py
from datetime import datetime
from enum import Enum
from pydantic import Field
from typing import Any, Dict, List, Optional
from uuid import UUID

from .common import CamelModel

class FirebaseKycStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    FIREBASE_VERIFIED = "FIREBASE_VERIFIED"
    FIREBASE_REJECTED = "FIREBASE_REJECTED"
    FIREBASE_ERROR = "FIREBASE_ERROR"
    ADMIN_REVIEW_REQUIRED = "ADMIN_REVIEW_REQUIRED"

class VerificationStatus(str, Enum):
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"

class AdminDecision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"

class KycResultData(CamelModel):
    """What is stored in technician.firebase_kyc_data."""
    confidence_score: Optional[float] = None
    document_urls: List[str] = []
    processed_at: Optional[datetime] = None
    requires_admin_review: Optional[bool] = None
    provider_payload: Dict[str, Any] = {}

class KycSubmission(CamelModel):
    firebase_kyc_status: FirebaseKycStatus
    firebase_kyc_data: Dict[str, Any] = {}
    document_urls: List[str] = []
    confidence_score: float = Field(..., ge=0, le=1)

class KycFinalDecision(CamelModel):
    decision: AdminDecision
    admin_notes: Optional[str] = None
    expected_version: Optional[int] = Field(
        None, description="Refuse the update unless the stored version still matches"
    )

class KycStatusOut(CamelModel):
    technician_id: UUID
    verification_status: VerificationStatus
    firebase_kyc_status: FirebaseKycStatus
    firebase_kyc_data: Optional[KycResultData] = None
    admin_notes: Optional[str] = None
    version: int

class KycReviewItem(CamelModel):
    id: UUID
    username: str
    email: str
    firebase_kyc_status: FirebaseKycStatus
    firebase_kyc_data: Optional[KycResultData] = None
    verification_status: VerificationStatus
    created_at: Optional[datetime] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None

class KycStatistics(CamelModel):
    pending: int = 0
    firebase_verified: int = 0
    firebase_rejected: int = 0
    admin_approved: int = 0
    admin_rejected: int = 0
    awaiting_admin_review: int = 0
