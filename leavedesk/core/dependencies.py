import logging
from typing import AsyncGenerator, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from leavedesk.core.database import async_session_factory
from leavedesk.core.exceptions import StoreUnavailable, Unauthorized
from leavedesk.core.security import decode_access_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header becomes our 401 rather than a bare 403
security_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session.

    Routes that write commit before returning so a failed commit still
    reaches the client as a 503; the commit here runs after the response.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except DBAPIError as exc:
            await session.rollback()
            logger.exception("Database error, unit of work rolled back")
            raise StoreUnavailable() from exc
        except Exception:
            await session.rollback()
            raise


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: AsyncSession = Depends(get_db),
):
    """Resolve the bearer token to the caller's Employee profile."""
    from leavedesk.models.employee import Employee
    from leavedesk.models.user import User

    if credentials is None:
        raise Unauthorized("Authorization required")

    try:
        payload = decode_access_token(credentials.credentials)
    except ValueError:
        raise Unauthorized("Invalid token")

    user_id = payload.get("sub")
    if user_id is None:
        raise Unauthorized("Invalid token payload")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise Unauthorized("Invalid token payload")

    result = await db.execute(select(User).where(User.id == user_uuid))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        raise Unauthorized("User not found or inactive")

    if user.employee_id is None:
        raise Unauthorized("User profile not found")
    employee = await db.get(Employee, user.employee_id)
    if employee is None:
        raise Unauthorized("User profile not found")

    return employee
