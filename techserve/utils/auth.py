# techserve/utils/auth.py
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from typing import Optional
import asyncpg
import secrets

from ..database import get_db
from ..config import settings
from ..models.auth import CurrentUser, Role

# Constants
SECRET_KEY = settings.secret_key
ALGORITHM = settings.algorithm
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="users/login")

# Every role resolves to exactly one table; technicians live apart from users.
ROLE_TABLES = {
    Role.USER: "app_user",
    Role.ADMIN: "app_user",
    Role.TECHNICIAN: "technician",
}

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def generate_token() -> str:
    """Random hex token for e-mail verification and password reset links."""
    return secrets.token_hex(32)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

def decode_access_token(token: str) -> dict:
    """Raises JWTError when the token is malformed, expired or badly signed."""
    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])

def token_for(subject_id, role: Role) -> str:
    return create_access_token(data={"sub": str(subject_id), "role": role.value})


async def get_current_user(token: str = Depends(oauth2_scheme), conn: asyncpg.Connection = Depends(get_db)) -> CurrentUser:
    """Get the current authenticated user from JWT token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        user_id: str = payload.get("sub")
        role = Role(payload.get("role"))
        if user_id is None:
            raise credentials_exception
    except (JWTError, ValueError):
        raise credentials_exception

    table = ROLE_TABLES[role]
    try:
        row = await conn.fetchrow(
            f"SELECT id, email, username FROM {table} WHERE id = $1",
            user_id
        )
    except asyncpg.DataError:
        raise credentials_exception

    if row is None:
        raise credentials_exception

    return CurrentUser(id=row["id"], role=role, email=row["email"], username=row["username"])


def require_roles(*roles: Role):
    """Dependency factory gating a route to the given roles."""
    async def checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: Access denied")
        return current_user
    return checker


def ensure_self_or_admin(current_user: CurrentUser, owner_id) -> None:
    if current_user.role != Role.ADMIN and str(current_user.id) != str(owner_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: Access denied")

__all__ = [
    "oauth2_scheme",
    "verify_password",
    "get_password_hash",
    "generate_token",
    "create_access_token",
    "decode_access_token",
    "token_for",
    "get_current_user",
    "require_roles",
    "ensure_self_or_admin",
    "ACCESS_TOKEN_EXPIRE_MINUTES"
]
