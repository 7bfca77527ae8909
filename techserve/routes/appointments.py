# techserve/routes/appointments.py
from fastapi import APIRouter, Depends, HTTPException, Response, status
from uuid import UUID
import asyncpg

from ..database import get_db
from ..models.appointment import AppointmentCreate, AppointmentOut, AppointmentUpdate, AppointmentWithParty
from ..models.auth import CurrentUser, Role
from ..models.common import Page
from ..queries import appointment_queries, technician_queries
from ..utils.auth import ensure_self_or_admin, get_current_user, require_roles
from ..utils.models import PaginationParams, page_of, pagination_params

appointments_router = APIRouter(prefix="/appointments", tags=["Appointments"])

def ensure_participant(current_user: CurrentUser, appointment: dict) -> None:
    if current_user.role == Role.ADMIN:
        return
    if str(current_user.id) not in (str(appointment["client_id"]), str(appointment["technician_id"])):
        raise HTTPException(status_code=403, detail="Not your appointment")

async def get_appointment_for(
    appointment_id: int,
    current_user: CurrentUser,
    conn: asyncpg.Connection
) -> dict:
    appointment = await appointment_queries.get_appointment(conn, appointment_id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    ensure_participant(current_user, appointment)
    return appointment

@appointments_router.post("/", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    payload: AppointmentCreate,
    current_user: CurrentUser = Depends(require_roles(Role.USER)),
    conn: asyncpg.Connection = Depends(get_db)
):
    if not await technician_queries.get_technician_by_id(conn, payload.technician_id):
        raise HTTPException(status_code=404, detail="Technician not found")
    return await appointment_queries.create_appointment(
        conn, current_user.id, payload.technician_id, payload.service_type, payload.appointment_date
    )

@appointments_router.get("/client/{client_id}", response_model=Page[AppointmentWithParty])
async def get_client_appointments(
    client_id: UUID,
    params: PaginationParams = Depends(pagination_params),
    current_user: CurrentUser = Depends(require_roles(Role.USER, Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    ensure_self_or_admin(current_user, client_id)
    appointments = await appointment_queries.get_client_appointments(conn, client_id, params.limit, params.offset)
    total = await appointment_queries.count_client_appointments(conn, client_id)
    return page_of(appointments, total, params)

@appointments_router.get("/technician/{technician_id}", response_model=Page[AppointmentWithParty])
async def get_technician_appointments(
    technician_id: UUID,
    params: PaginationParams = Depends(pagination_params),
    current_user: CurrentUser = Depends(require_roles(Role.TECHNICIAN, Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    ensure_self_or_admin(current_user, technician_id)
    appointments = await appointment_queries.get_technician_appointments(
        conn, technician_id, params.limit, params.offset
    )
    total = await appointment_queries.count_technician_appointments(conn, technician_id)
    return page_of(appointments, total, params)

@appointments_router.get("/{appointment_id}", response_model=AppointmentOut)
async def get_appointment(
    appointment_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await get_appointment_for(appointment_id, current_user, conn)

@appointments_router.put("/{appointment_id}", response_model=AppointmentOut)
async def update_appointment(
    appointment_id: int,
    payload: AppointmentUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    await get_appointment_for(appointment_id, current_user, conn)
    appointment = await appointment_queries.update_appointment(
        conn,
        appointment_id,
        service_type=payload.service_type,
        appointment_date=payload.appointment_date,
        status=payload.status.value if payload.status else None
    )
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment

@appointments_router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    await get_appointment_for(appointment_id, current_user, conn)
    await appointment_queries.delete_appointment(conn, appointment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

__all__ = ["appointments_router", "get_appointment_for"]
