# techserve/routes/services.py
from fastapi import APIRouter, Depends, HTTPException, Response, status
import asyncpg

from ..database import get_db
from ..models.auth import CurrentUser, Role
from ..models.catalog import ServiceCreate, ServiceOut, ServiceUpdate
from ..models.common import Page
from ..queries import catalog_queries, technician_queries
from ..utils.auth import ensure_self_or_admin, require_roles
from ..utils.models import PaginationParams, page_of, pagination_params

services_router = APIRouter(prefix="/services", tags=["Services"])

async def get_owned_service(
    service_id: int,
    current_user: CurrentUser,
    conn: asyncpg.Connection
) -> dict:
    service = await catalog_queries.get_service(conn, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    ensure_self_or_admin(current_user, service["technician_id"])
    return service

@services_router.get("/", response_model=Page[ServiceOut])
async def list_services(
    params: PaginationParams = Depends(pagination_params),
    conn: asyncpg.Connection = Depends(get_db)
):
    services = await catalog_queries.list_services(conn, params.limit, params.offset)
    total = await catalog_queries.count_services(conn)
    return page_of(services, total, params)

@services_router.get("/{service_id}", response_model=ServiceOut)
async def get_service(
    service_id: int,
    conn: asyncpg.Connection = Depends(get_db)
):
    service = await catalog_queries.get_service(conn, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service

@services_router.post("/", response_model=ServiceOut, status_code=status.HTTP_201_CREATED)
async def create_service(
    payload: ServiceCreate,
    current_user: CurrentUser = Depends(require_roles(Role.TECHNICIAN, Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    ensure_self_or_admin(current_user, payload.technician_id)
    if not await technician_queries.get_technician_by_id(conn, payload.technician_id):
        raise HTTPException(status_code=404, detail="Technician not found")
    return await catalog_queries.create_service(conn, payload.name, payload.price, payload.technician_id)

@services_router.put("/{service_id}", response_model=ServiceOut)
async def update_service(
    service_id: int,
    payload: ServiceUpdate,
    current_user: CurrentUser = Depends(require_roles(Role.TECHNICIAN, Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    await get_owned_service(service_id, current_user, conn)
    service = await catalog_queries.update_service(conn, service_id, name=payload.name, price=payload.price)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service

@services_router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: int,
    current_user: CurrentUser = Depends(require_roles(Role.TECHNICIAN, Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    await get_owned_service(service_id, current_user, conn)
    if not await catalog_queries.delete_service(conn, service_id):
        raise HTTPException(status_code=404, detail="Service not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

__all__ = ["services_router"]
