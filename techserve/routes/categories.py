from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import asyncpg

from ..database import get_db
from ..models.auth import CurrentUser, Role
from ..models.catalog import CategoryCreate, CategoryOut
from ..queries import catalog_queries
from ..utils.auth import require_roles

categories_router = APIRouter(prefix="/categories", tags=["Categories"])

@categories_router.get("/", response_model=List[CategoryOut])
async def list_categories(conn: asyncpg.Connection = Depends(get_db)):
    return await catalog_queries.list_categories(conn)

@categories_router.post("/", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    current_user: CurrentUser = Depends(require_roles(Role.ADMIN)),
    conn: asyncpg.Connection = Depends(get_db)
):
    if await catalog_queries.get_category_by_name(conn, payload.name):
        raise HTTPException(status_code=409, detail="Category already exists")
    return await catalog_queries.create_category(conn, payload.name)

__all__ = ["categories_router"]
