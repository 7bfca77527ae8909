from fastapi import APIRouter, Depends, status
import asyncpg

from ..database import get_db
from ..models.auth import CurrentUser
from ..models.common import Page
from ..models.message import MessageCreate, MessageOut
from ..queries import message_queries
from ..utils.auth import get_current_user
from ..utils.models import PaginationParams, page_of, pagination_params
from .appointments import get_appointment_for

messages_router = APIRouter(prefix="/messages", tags=["Messages"])

@messages_router.get("/appointment/{appointment_id}", response_model=Page[MessageOut])
async def list_messages(
    appointment_id: int,
    params: PaginationParams = Depends(pagination_params),
    current_user: CurrentUser = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    await get_appointment_for(appointment_id, current_user, conn)
    messages = await message_queries.list_messages(conn, appointment_id, params.limit, params.offset)
    total = await message_queries.count_messages(conn, appointment_id)
    return page_of(messages, total, params)

@messages_router.post(
    "/appointment/{appointment_id}",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED
)
async def send_message(
    appointment_id: int,
    payload: MessageCreate,
    current_user: CurrentUser = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    await get_appointment_for(appointment_id, current_user, conn)
    return await message_queries.create_message(
        conn, appointment_id, current_user.id, current_user.role.value, payload.content
    )

__all__ = ["messages_router"]
