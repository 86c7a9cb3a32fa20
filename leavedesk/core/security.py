from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends
from jose import JWTError, jwt
from passlib.context import CryptContext

from leavedesk.core.config import settings
from leavedesk.core.exceptions import Forbidden

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    data: dict[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """Create a JWT with sub (user_id) and role claims."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
        return payload
    except JWTError:
        raise ValueError("Invalid token")


def ensure_role(caller, *allowed_roles: str) -> None:
    """Single authorization gate: raise Forbidden unless caller has a role."""
    if caller is None or caller.role not in allowed_roles:
        raise Forbidden(
            "Admin access required" if allowed_roles == ("admin",)
            else f"Required role: {', '.join(allowed_roles)}"
        )


def require_role(*allowed_roles: str):
    """Dependency factory that checks the current user has one of the allowed roles.

    Usage:
        @router.delete("/{id}", dependencies=[Depends(require_role("admin"))])
        async def admin_endpoint(...): ...

    Or as a direct dependency:
        current_user = Depends(require_role("admin"))
    """
    from leavedesk.core.dependencies import get_current_user

    async def role_checker(current_user=Depends(get_current_user)):
        ensure_role(current_user, *allowed_roles)
        return current_user

    return role_checker
