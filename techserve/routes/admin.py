# techserve/routes/admin.py
from fastapi import APIRouter, Depends, Query
from typing import Optional
import asyncpg

from ..database import get_db
from ..models.admin import DashboardStats
from ..models.auth import CurrentUser, Role
from ..models.common import Page
from ..models.kyc import VerificationStatus
from ..models.technician import TechnicianOut
from ..queries import admin_queries, technician_queries
from ..utils.auth import require_roles
from ..utils.models import PaginationParams, page_of, pagination_params

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

@admin_router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: CurrentUser = Depends(require_roles(Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await admin_queries.dashboard_stats(conn)

@admin_router.get("/technicians", response_model=Page[TechnicianOut])
async def list_technicians_by_status(
    verification_status: Optional[VerificationStatus] = Query(None, alias="verificationStatus"),
    params: PaginationParams = Depends(pagination_params),
    current_user: CurrentUser = Depends(require_roles(Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    status_value = verification_status.value if verification_status else None
    technicians = await technician_queries.list_technicians(
        conn, params.limit, params.offset, verification_status=status_value
    )
    total = await technician_queries.count_technicians(conn, verification_status=status_value)
    return page_of(technicians, total, params)

__all__ = ["admin_router"]
