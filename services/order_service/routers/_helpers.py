"""Shared helper dependencies for order service routers."""

from fastapi import Depends, HTTPException, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.order_service.models import Member
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


async def get_current_member(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> Member:
    """Resolve the authenticated user to a member row by email."""
    if not current_user.email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no email claim",
        )
    result = await db.execute(select(Member).where(Member.email == current_user.email))
    member = result.scalar_one_or_none()
    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Member not found",
        )
    return member
