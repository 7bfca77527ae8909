from .auth import Role, Token, CurrentUser, LoginRequest
from .common import CamelModel, Page, Message
from .kyc import (
    VerificationStatus,
    FirebaseKycStatus,
    AdminDecision,
    KycResultData,
    KycSubmission,
    KycFinalDecision,
    KycStatistics
)
from .technician import (
    AvailabilityStatus,
    TechnicianCreate,
    TechnicianUpdate,
    TechnicianOut,
    TechnicianDetail,
    NearbyTechnician
)
from .appointment import AppointmentStatus, AppointmentCreate, AppointmentUpdate, AppointmentOut
from .payment import PaymentStatus, PaymentCreate, PaymentOut
from .rating import RatingCreate, RatingOut, TechnicianRatings

__all__ = [
    'Role', 'Token', 'CurrentUser', 'LoginRequest',
    'CamelModel', 'Page', 'Message',
    'VerificationStatus', 'FirebaseKycStatus', 'AdminDecision', 'KycResultData',
    'KycSubmission', 'KycFinalDecision', 'KycStatistics',
    'AvailabilityStatus', 'TechnicianCreate', 'TechnicianUpdate', 'TechnicianOut',
    'TechnicianDetail', 'NearbyTechnician',
    'AppointmentStatus', 'AppointmentCreate', 'AppointmentUpdate', 'AppointmentOut',
    'PaymentStatus', 'PaymentCreate', 'PaymentOut',
    'RatingCreate', 'RatingOut', 'TechnicianRatings'
]
