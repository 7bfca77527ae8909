from fastapi import APIRouter, Depends, HTTPException
from typing import List
import asyncpg

from ..database import get_db
from ..models.auth import CurrentUser, Role
from ..models.common import Message
from ..models.notification import DeviceTokenRegister, NotificationOut, PushNotificationRequest, PushResult
from ..queries import notification_queries
from ..services.notifier import push_sender
from ..utils.auth import get_current_user, require_roles

notifications_router = APIRouter(prefix="/notifications", tags=["Notifications"])

@notifications_router.post("/register", response_model=Message)
async def register_device_token(
    payload: DeviceTokenRegister,
    current_user: CurrentUser = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    await notification_queries.upsert_device_token(conn, payload.token, current_user.id, current_user.role.value)
    return {"message": "Device token registered"}

@notifications_router.post("/send", response_model=PushResult)
async def send_push_notification(
    payload: PushNotificationRequest,
    current_user: CurrentUser = Depends(require_roles(Role.ADMIN))
):
    return push_sender.send(payload.token, payload.title, payload.body, payload.data)

@notifications_router.get("/", response_model=List[NotificationOut])
async def get_notifications(
    status: str = "all",  # Options: "all", "read", "unread"
    current_user: CurrentUser = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    if status not in ("all", "read", "unread"):
        raise HTTPException(status_code=400, detail="status must be one of all, read, unread")
    return await notification_queries.list_notifications(conn, current_user.id, status)

@notifications_router.get("/unread/count")
async def get_unread_notification_count(
    current_user: CurrentUser = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    return {"unread_count": await notification_queries.count_unread(conn, current_user.id)}

@notifications_router.put("/mark-all-read", response_model=Message)
async def mark_all_read(
    current_user: CurrentUser = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    await notification_queries.mark_all_read(conn, current_user.id)
    return {"message": "All notifications marked as read"}

@notifications_router.put("/{notification_id}/mark-read", response_model=Message)
async def mark_notification_read(
    notification_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    if not await notification_queries.mark_read(conn, notification_id, current_user.id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"message": "Notification marked as read"}

__all__ = ["notifications_router"]
