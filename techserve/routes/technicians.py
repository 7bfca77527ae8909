# techserve/routes/technicians.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
from uuid import UUID
import asyncpg
import logging

from ..database import get_db
from ..models.auth import CurrentUser, LoginRequest, Role, Token
from ..models.common import Message, Page
from ..models.technician import (
    NearbyTechnician,
    TechnicianAvailability,
    TechnicianCreate,
    TechnicianDetail,
    TechnicianOut,
    TechnicianRegistered,
    TechnicianSummary,
    TechnicianUpdate
)
from ..queries import location_queries, technician_queries
from ..services.notifier import email_sender
from ..utils.auth import (
    ensure_self_or_admin,
    generate_token,
    get_password_hash,
    require_roles,
    token_for,
    verify_password
)
from ..utils.models import PaginationParams, page_of, pagination_params

technicians_router = APIRouter(prefix="/technicians", tags=["Technicians"])
logger = logging.getLogger(__name__)

@technicians_router.get("/", response_model=Page[TechnicianSummary])
async def list_technicians(
    params: PaginationParams = Depends(pagination_params),
    conn: asyncpg.Connection = Depends(get_db)
):
    technicians = await technician_queries.list_technicians(conn, params.limit, params.offset)
    total = await technician_queries.count_technicians(conn)
    return page_of(technicians, total, params)

@technicians_router.post("/", response_model=TechnicianRegistered, status_code=status.HTTP_201_CREATED)
async def register_technician(
    payload: TechnicianCreate,
    conn: asyncpg.Connection = Depends(get_db)
):
    taken = await technician_queries.username_or_email_taken(conn, payload.username, payload.email)
    if taken:
        raise HTTPException(status_code=409, detail=f"{taken.capitalize()} already taken")
    if not await technician_queries.category_exists(conn, payload.category_id):
        raise HTTPException(status_code=400, detail="Category does not exist")

    token = generate_token()
    technician = await technician_queries.create_technician(
        conn,
        payload.username,
        payload.email,
        get_password_hash(payload.password),
        payload.category_id,
        payload.documents,
        token
    )
    email_sender.send_verification(
        technician["email"], technician["username"], token, "/technicians/verify-email"
    )
    logger.info(f"Registered technician {technician['id']}, verification pending")

    return {
        "message": "Technician registered successfully. Please verify your email",
        "technician": technician
    }

@technicians_router.get("/verify-email", response_model=Message)
async def verify_technician_email(
    token: str = Query(..., min_length=1),
    conn: asyncpg.Connection = Depends(get_db)
):
    if not await technician_queries.consume_verification_token(conn, token):
        raise HTTPException(status_code=400, detail="Invalid or expired token")
    return {"message": "Email verified successfully. You can now log in."}

@technicians_router.post("/login", response_model=Token)
async def login_technician(
    payload: LoginRequest,
    conn: asyncpg.Connection = Depends(get_db)
):
    technician = await technician_queries.get_technician_credentials(conn, payload.username)
    if not technician:
        raise HTTPException(status_code=404, detail="Technician not found")
    if not technician["email_verified"]:
        raise HTTPException(status_code=403, detail="Please verify your email to log in")
    if not verify_password(payload.password, technician["password_hash"]):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {
        "access_token": token_for(technician["id"], Role.TECHNICIAN),
        "token_type": "bearer",
        "role": Role.TECHNICIAN
    }

@technicians_router.get("/nearby", response_model=List[NearbyTechnician])
async def get_nearby_technicians(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(..., alias="radiusKm", gt=0, le=500),
    service_type: Optional[str] = Query(None, alias="serviceType"),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await location_queries.find_technicians_within(
        conn, latitude, longitude, radius_km, service_type=service_type
    )

@technicians_router.get("/{technician_id}", response_model=TechnicianDetail)
async def get_technician(
    technician_id: UUID,
    conn: asyncpg.Connection = Depends(get_db)
):
    technician = await technician_queries.get_technician_detail(conn, technician_id)
    if not technician:
        raise HTTPException(status_code=404, detail="Technician not found")
    return technician

@technicians_router.put("/{technician_id}", response_model=TechnicianOut)
async def update_technician(
    technician_id: UUID,
    payload: TechnicianUpdate,
    current_user: CurrentUser = Depends(require_roles(Role.TECHNICIAN, Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    ensure_self_or_admin(current_user, technician_id)
    if payload.username or payload.email:
        taken = await technician_queries.username_or_email_taken(
            conn, payload.username, payload.email, exclude_id=technician_id
        )
        if taken:
            raise HTTPException(status_code=409, detail=f"{taken.capitalize()} already taken")
    if payload.category_id is not None and not await technician_queries.category_exists(conn, payload.category_id):
        raise HTTPException(status_code=400, detail="Category does not exist")

    technician = await technician_queries.update_technician(
        conn,
        technician_id,
        username=payload.username,
        email=payload.email,
        password_hash=get_password_hash(payload.password) if payload.password else None,
        category_id=payload.category_id,
        documents=payload.documents
    )
    if not technician:
        raise HTTPException(status_code=404, detail="Technician not found")
    if payload.documents:
        logger.info(f"Technician {technician_id} uploaded new documents, verification reset")
    return technician

@technicians_router.patch("/{technician_id}/availability", response_model=TechnicianOut)
async def set_availability(
    technician_id: UUID,
    payload: TechnicianAvailability,
    current_user: CurrentUser = Depends(require_roles(Role.TECHNICIAN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    ensure_self_or_admin(current_user, technician_id)
    technician = await technician_queries.update_availability(
        conn, technician_id, payload.availability_status.value
    )
    if not technician:
        raise HTTPException(status_code=404, detail="Technician not found")
    return technician

@technicians_router.delete("/{technician_id}", response_model=Message)
async def delete_technician(
    technician_id: UUID,
    current_user: CurrentUser = Depends(require_roles(Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    if not await technician_queries.delete_technician(conn, technician_id):
        raise HTTPException(status_code=404, detail="Technician not found")
    return {"message": "Technician deleted"}

__all__ = ["technicians_router"]
