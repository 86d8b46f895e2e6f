"""
Authorized-user gate.

Identity is established upstream; requests carry the caller's email in a
header and this gate only checks it against the authorized users table.
"""
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import get_settings
from backend.database import get_db
from backend.models.user import AuthorizedUser


async def find_authorized_user(db: AsyncSession, email: str) -> Optional[AuthorizedUser]:
    """Active authorized user with this email, or None"""
    result = await db.execute(
        select(AuthorizedUser).where(
            func.lower(AuthorizedUser.email) == email.strip().lower(),
            AuthorizedUser.is_active == True,
        )
    )
    return result.scalar_one_or_none()


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[AuthorizedUser]:
    settings = get_settings()
    if not settings.AUTH_ENABLED:
        return None

    email = request.headers.get(settings.AUTH_HEADER)
    if not email:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = await find_authorized_user(db, email)
    if not user:
        raise HTTPException(status_code=403, detail="User not authorized")
    return user
