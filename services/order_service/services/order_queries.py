"""Read side: order views and point balances for a member."""

from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from services.order_service import repository
from services.order_service.exceptions import NotOwner, OrderNotFound
from services.order_service.models import Member, Order
from services.order_service.schemas import (
    OrderItemResponse,
    OrderResponse,
    PointResponse,
    PointSummaryResponse,
)
from sqlalchemy.ext.asyncio import AsyncSession


async def _to_response(db: AsyncSession, order: Order) -> OrderResponse:
    order_items = await repository.find_order_items_by_order_id(db, order.id)
    return OrderResponse(
        order_id=order.id,
        created_at=order.created_at,
        items=[OrderItemResponse.model_validate(item) for item in order_items],
        total_price=sum(item.line_total for item in order_items),
        used_point=order.used_point,
        earned_point=order.earned_point,
    )


async def get_order(db: AsyncSession, member: Member, order_id: int) -> OrderResponse:
    order = await repository.find_order_by_id(db, order_id)
    if not order:
        raise OrderNotFound(f"Order {order_id} not found")
    if order.member_id != member.id:
        raise NotOwner(f"Order {order_id} belongs to another member")
    return await _to_response(db, order)


async def list_orders(db: AsyncSession, member: Member) -> list[OrderResponse]:
    """All orders of ``member``, newest first."""
    orders = await repository.find_orders_by_member_id(db, member.id)
    return [await _to_response(db, order) for order in orders]


async def get_point_summary(
    db: AsyncSession, member: Member, now: Optional[datetime] = None
) -> PointSummaryResponse:
    points = await repository.find_available_points(db, member.id, now or utc_now())
    return PointSummaryResponse(
        total_available=sum(p.left_point for p in points),
        points=[PointResponse.model_validate(p) for p in points],
    )
