# techserve/queries/__init__.py
from . import (
    admin_queries,
    appointment_queries,
    catalog_queries,
    kyc_queries,
    location_queries,
    message_queries,
    notification_queries,
    payment_queries,
    rating_queries,
    technician_queries,
    user_queries
)

__all__ = [
    'admin_queries',
    'appointment_queries',
    'catalog_queries',
    'kyc_queries',
    'location_queries',
    'message_queries',
    'notification_queries',
    'payment_queries',
    'rating_queries',
    'technician_queries',
    'user_queries'
]
