# techserve/utils/__init__.py
from .auth import (
    oauth2_scheme,
    verify_password,
    get_password_hash,
    create_access_token,
    get_current_user,
    require_roles
)
from .models import PaginationParams, pagination_params, page_of

__all__ = [
    "oauth2_scheme",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "get_current_user",
    "require_roles",
    "PaginationParams",
    "pagination_params",
    "page_of"
]
