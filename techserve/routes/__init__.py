# techserve/routes/__init__.py
from .users import users_router, verification_router
from .password_reset import password_router
from .technicians import technicians_router
from .kyc import kyc_router
from .locations import location_router
from .nearest import nearest_router
from .categories import categories_router
from .services import services_router
from .appointments import appointments_router
from .ratings import ratings_router
from .payments import payments_router
from .messages import messages_router
from .notifications import notifications_router
from .admin import admin_router

routers = [
    users_router,
    verification_router,
    password_router,
    technicians_router,
    kyc_router,
    location_router,
    nearest_router,
    categories_router,
    services_router,
    appointments_router,
    ratings_router,
    payments_router,
    messages_router,
    notifications_router,
    admin_router
]

__all__ = ["routers"]
