"""Stock decrements for validated cart items."""

from typing import Sequence

from libs.common.logging import get_logger
from services.order_service import repository
from services.order_service.exceptions import QuantityExceedsStock
from services.order_service.services.cart_validation import ValidatedCartItem
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def apply_decrements(
    db: AsyncSession, validated_items: Sequence[ValidatedCartItem]
) -> None:
    """Set ``stock = stock - quantity`` for every item.

    Stock is re-checked at write time. No compensation on failure: the
    enclosing unit of work rolls back every decrement already applied.
    """
    for item in validated_items:
        product = item.product
        quantity = item.cart_item.quantity
        if quantity > product.stock:
            raise QuantityExceedsStock(
                f"Only {product.stock} left of {product.name}, need {quantity}"
            )
        new_stock = product.stock - quantity
        await repository.update_stock(db, product, new_stock)
        logger.debug(
            "Stock for product %s: %d -> %d", product.id, new_stock + quantity, new_stock
        )
