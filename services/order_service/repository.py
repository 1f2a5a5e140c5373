"""Persistence functions for cart items, products, points, orders and order items.

Every function works on the caller's ``AsyncSession`` and never commits, so
the caller decides the transaction boundary.
"""

from datetime import datetime
from typing import Optional, Sequence

from services.order_service.models import CartItem, Order, OrderItem, Point, Product
from services.order_service.services.order_assembly import (
    OrderDraft,
    OrderItemSnapshot,
)
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

# ============================================================================
# CART ITEMS
# ============================================================================


async def find_cart_item_by_id(
    db: AsyncSession, cart_item_id: int
) -> Optional[CartItem]:
    result = await db.execute(select(CartItem).where(CartItem.id == cart_item_id))
    return result.scalar_one_or_none()


async def find_cart_item_by_member_and_product(
    db: AsyncSession, member_id: int, product_id: int
) -> Optional[CartItem]:
    result = await db.execute(
        select(CartItem).where(
            CartItem.member_id == member_id,
            CartItem.product_id == product_id,
        )
    )
    return result.scalar_one_or_none()


async def delete_cart_items_by_ids(db: AsyncSession, ids: Sequence[int]) -> None:
    if not ids:
        return
    await db.execute(delete(CartItem).where(CartItem.id.in_(ids)))


# ============================================================================
# PRODUCTS
# ============================================================================


async def find_product_by_id(
    db: AsyncSession, product_id: int, *, for_update: bool = False
) -> Optional[Product]:
    """Load a product; ``for_update`` holds a row lock until the transaction ends."""
    query = select(Product).where(Product.id == product_id)
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def update_stock(db: AsyncSession, product: Product, new_stock: int) -> None:
    product.stock = new_stock
    await db.flush()


# ============================================================================
# POINTS
# ============================================================================


async def find_available_points(
    db: AsyncSession,
    member_id: int,
    as_of: datetime,
    *,
    for_update: bool = False,
) -> list[Point]:
    """Points with a positive balance that expire strictly after ``as_of``.

    Ordered earliest expiry first, then by id.
    """
    query = (
        select(Point)
        .where(
            Point.member_id == member_id,
            Point.left_point > 0,
            Point.expires_at > as_of,
        )
        .order_by(Point.expires_at, Point.id)
    )
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    return list(result.scalars().all())


async def create_point(
    db: AsyncSession,
    *,
    member_id: int,
    earned_point: int,
    earned_at: datetime,
    expires_at: datetime,
) -> Point:
    point = Point(
        member_id=member_id,
        earned_point=earned_point,
        left_point=earned_point,
        earned_at=earned_at,
        expires_at=expires_at,
    )
    db.add(point)
    await db.flush()  # Get point ID
    return point


async def update_left_point(db: AsyncSession, point: Point, left_point: int) -> None:
    point.left_point = left_point
    await db.flush()


# ============================================================================
# ORDERS
# ============================================================================


async def create_order(db: AsyncSession, draft: OrderDraft, point_id: int) -> Order:
    order = Order(
        member_id=draft.member_id,
        point_id=point_id,
        used_point=draft.used_point,
        earned_point=draft.earned_point,
        created_at=draft.created_at,
    )
    db.add(order)
    await db.flush()  # Get order ID
    return order


async def find_order_by_id(db: AsyncSession, order_id: int) -> Optional[Order]:
    result = await db.execute(select(Order).where(Order.id == order_id))
    return result.scalar_one_or_none()


async def find_orders_by_member_id(db: AsyncSession, member_id: int) -> list[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.member_id == member_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return list(result.scalars().all())


# ============================================================================
# ORDER ITEMS
# ============================================================================


async def create_order_item(
    db: AsyncSession, order_id: int, snapshot: OrderItemSnapshot
) -> OrderItem:
    order_item = OrderItem(
        order_id=order_id,
        product_id=snapshot.product_id,
        product_name=snapshot.name,
        product_price=snapshot.price,
        product_image_url=snapshot.image_url,
        quantity=snapshot.quantity,
    )
    db.add(order_item)
    await db.flush()
    return order_item


async def find_order_items_by_order_id(
    db: AsyncSession, order_id: int
) -> list[OrderItem]:
    result = await db.execute(
        select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
    )
    return list(result.scalars().all())
