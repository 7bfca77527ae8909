# techserve/routes/password_reset.py
from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Depends, HTTPException
import asyncpg

from ..config import settings
from ..database import get_db
from ..models.auth import ForgotPasswordRequest, ResetPasswordRequest
from ..models.common import Message
from ..queries import user_queries
from ..services.notifier import email_sender
from ..utils.auth import generate_token, get_password_hash

password_router = APIRouter(tags=["Password Reset"])

@password_router.post("/forgot-password", response_model=Message)
async def forgot_password(
    payload: ForgotPasswordRequest,
    conn: asyncpg.Connection = Depends(get_db)
):
    user = await user_queries.get_user_by_email(conn, payload.email)
    if not user:
        raise HTTPException(status_code=404, detail="User with this email does not exist")

    token = generate_token()
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.reset_token_expire_minutes)
    await user_queries.set_reset_token(conn, payload.email, token, expires_at)
    email_sender.send_password_reset(payload.email, token)

    return {"message": "Password reset email sent"}

@password_router.post("/reset-password", response_model=Message)
async def reset_password(
    payload: ResetPasswordRequest,
    conn: asyncpg.Connection = Depends(get_db)
):
    if not await user_queries.reset_password(conn, payload.token, get_password_hash(payload.new_password)):
        raise HTTPException(status_code=400, detail="Invalid or expired token")
    return {"message": "Password has been reset successfully"}

__all__ = ["password_router"]
