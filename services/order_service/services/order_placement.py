"""Place an order from cart items as one unit of work.

Sequence (each step aborts the whole placement on failure):

1. Capture the order timestamp once
2. Reject redemptions larger than the declared total
3. Redeem points from available batches (row-locked)
4. Earn new points and insert the point batch
5. Load and validate the cart items (product rows locked)
6. Decrement stock
7. Delete the consumed cart items
8. Build the order draft and checksum the declared total
9. Insert the order and its items
10. Commit and return the order id
"""

from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.db.session import unit_of_work
from services.order_service import repository
from services.order_service.exceptions import OrderServiceError
from services.order_service.models import Member
from services.order_service.schemas import OrderRequest
from services.order_service.services.cart_validation import load_and_validate
from services.order_service.services.inventory import apply_decrements
from services.order_service.services.order_assembly import (
    build_order,
    check_total_price,
)
from services.order_service.services.point_ledger import OrderPoint
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def _use_points(
    db: AsyncSession,
    order_point: OrderPoint,
    member: Member,
    used_point: int,
    created_at: datetime,
) -> None:
    if used_point == 0:
        return
    points = await repository.find_available_points(
        db, member.id, created_at, for_update=True
    )
    for deduction in order_point.use_point(used_point, points, as_of=created_at):
        await repository.update_left_point(db, deduction.point, deduction.left_point)


async def place_order(
    db: AsyncSession,
    member: Member,
    request: OrderRequest,
    *,
    order_point: Optional[OrderPoint] = None,
    now: Optional[datetime] = None,
) -> int:
    """Place an order for ``member`` and return the new order id.

    Nothing is persisted unless every step succeeds.
    """
    order_point = order_point or OrderPoint()
    member_id = member.id
    # 1. One timestamp for point eligibility, point expiry and the order itself
    created_at = now or utc_now()

    try:
        async with unit_of_work(db):
            # 2. Points can never cover more than the purchase
            order_point.check_redemption(request.point, request.total_price)

            # 3. Redeem
            await _use_points(db, order_point, member, request.point, created_at)

            # 4. Earn
            earned = order_point.earn_point(
                member_id, request.point, request.total_price, created_at
            )
            new_point = await repository.create_point(
                db,
                member_id=member_id,
                earned_point=earned.earned_point,
                earned_at=earned.earned_at,
                expires_at=earned.expires_at,
            )

            # 5. Validate cart items
            validated_items = await load_and_validate(db, member, request.cart_item_ids)

            # 6. Decrement stock
            await apply_decrements(db, validated_items)

            # 7. Remove from cart
            await repository.delete_cart_items_by_ids(
                db, [item.cart_item.id for item in validated_items]
            )

            # 8. Build and checksum
            draft = build_order(
                member_id,
                request.point,
                earned.earned_point,
                created_at,
                validated_items,
            )
            check_total_price(draft, request.total_price)

            # 9. Persist order and items
            order = await repository.create_order(db, draft, new_point.id)
            order_id = order.id
            for snapshot in draft.items:
                await repository.create_order_item(db, order_id, snapshot)
    except OrderServiceError as e:
        logger.warning(
            "Order placement rejected for member %s: %s (%s)",
            member_id,
            e.code,
            e.detail,
        )
        raise

    logger.info(
        "Placed order %s for member %s (items=%d, total=%d, used=%d, earned=%d)",
        order_id,
        member_id,
        len(draft.items),
        draft.total_price,
        draft.used_point,
        draft.earned_point,
    )
    return order_id
