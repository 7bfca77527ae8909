from fastapi import Query
from pydantic import BaseModel

class PaginationParams(BaseModel):
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

def pagination_params(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100)
) -> PaginationParams:
    return PaginationParams(page=page, limit=limit)

def page_of(items: list, total: int, params: PaginationParams) -> dict:
    return {"items": items, "total": total, "page": params.page, "page_size": params.limit}
