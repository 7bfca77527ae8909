# techserve/routes/users.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from uuid import UUID
import asyncpg
import logging

from ..database import get_db
from ..models.auth import CurrentUser, LoginRequest, Role, Token
from ..models.common import Message, Page
from ..models.user import UserCreate, UserOut, UserUpdate
from ..queries import user_queries
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

users_router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)

@users_router.post("/", response_model=Message, status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: UserCreate,
    conn: asyncpg.Connection = Depends(get_db)
):
    taken = await user_queries.username_or_email_taken(conn, payload.username, payload.email)
    if taken:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"{taken.capitalize()} already taken")

    token = generate_token()
    user = await user_queries.create_user(
        conn, payload.username, payload.email, get_password_hash(payload.password), token
    )
    email_sender.send_verification(user["email"], user["username"], token, "/verify-email")
    logger.info(f"Registered user {user['id']}")

    return {"message": "User created. Please check your email to verify your account."}

@users_router.post("/login", response_model=Token)
async def login_user(
    payload: LoginRequest,
    conn: asyncpg.Connection = Depends(get_db)
):
    user = await user_queries.get_user_credentials(conn, payload.username)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not user["is_verified"]:
        raise HTTPException(status_code=403, detail="Please verify your email to log in")
    if not verify_password(payload.password, user["password_hash"]):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    role = Role(user["role"])
    return {"access_token": token_for(user["id"], role), "token_type": "bearer", "role": role}

@users_router.get("/", response_model=Page[UserOut])
async def list_users(
    params: PaginationParams = Depends(pagination_params),
    current_user: CurrentUser = Depends(require_roles(Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    users = await user_queries.list_users(conn, params.limit, params.offset)
    total = await user_queries.count_users(conn)
    return page_of(users, total, params)

@users_router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: UUID,
    current_user: CurrentUser = Depends(require_roles(Role.USER, Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    ensure_self_or_admin(current_user, user_id)
    user = await user_queries.get_user_by_id(conn, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@users_router.put("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: UUID,
    payload: UserUpdate,
    current_user: CurrentUser = Depends(require_roles(Role.USER, Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    ensure_self_or_admin(current_user, user_id)
    if payload.username or payload.email:
        taken = await user_queries.username_or_email_taken(
            conn, payload.username, payload.email, exclude_id=user_id
        )
        if taken:
            raise HTTPException(status_code=409, detail=f"{taken.capitalize()} already taken")

    user = await user_queries.update_user(
        conn,
        user_id,
        username=payload.username,
        email=payload.email,
        password_hash=get_password_hash(payload.password) if payload.password else None
    )
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@users_router.delete("/{user_id}", response_model=Message)
async def delete_user(
    user_id: UUID,
    current_user: CurrentUser = Depends(require_roles(Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    if not await user_queries.delete_user(conn, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "User deleted"}


verification_router = APIRouter(tags=["Users"])

@verification_router.get("/verify-email", response_model=Message)
async def verify_email(
    token: str = Query(..., min_length=1),
    conn: asyncpg.Connection = Depends(get_db)
):
    if not await user_queries.consume_verification_token(conn, token):
        raise HTTPException(status_code=400, detail="Invalid or expired token")
    return {"message": "Email verified successfully"}

__all__ = ["users_router", "verification_router"]
