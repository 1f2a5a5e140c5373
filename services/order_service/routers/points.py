"""Points router: the member's available loyalty points."""

from fastapi import APIRouter, Depends
from libs.db.session import get_async_db
from services.order_service.models import Member
from services.order_service.routers._helpers import get_current_member
from services.order_service.schemas import PointSummaryResponse
from services.order_service.services.order_queries import get_point_summary
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["points"])


@router.get("/points/me", response_model=PointSummaryResponse)
async def get_my_points(
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_db),
):
    """Get member's available points, earliest expiry first."""
    return await get_point_summary(db, member)
