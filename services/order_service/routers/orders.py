"""Orders router: place an order from cart items and read order history."""

from fastapi import APIRouter, Depends, status
from libs.db.session import get_async_db
from services.order_service.models import Member
from services.order_service.routers._helpers import get_current_member
from services.order_service.schemas import (
    OrderCreatedResponse,
    OrderRequest,
    OrderResponse,
)
from services.order_service.services.order_placement import place_order
from services.order_service.services.order_queries import get_order, list_orders
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["orders"])


@router.post(
    "/orders",
    response_model=OrderCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    request: OrderRequest,
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_db),
):
    """Order the selected cart items, redeeming and earning points."""
    order_id = await place_order(db, member, request)
    return OrderCreatedResponse(order_id=order_id)


@router.get("/orders", response_model=list[OrderResponse])
async def list_my_orders(
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_db),
):
    """List member's orders, newest first."""
    return await list_orders(db, member)


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_my_order(
    order_id: int,
    member: Member = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_db),
):
    """Get one of the member's orders."""
    return await get_order(db, member, order_id)
