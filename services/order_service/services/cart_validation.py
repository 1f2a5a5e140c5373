"""Load the cart items named in an order request and check they can be ordered."""

from dataclasses import dataclass
from typing import Sequence

from services.order_service import repository
from services.order_service.exceptions import (
    CartItemNotFound,
    NotOwner,
    ProductNotFound,
    QuantityExceedsStock,
)
from services.order_service.models import CartItem, Member, Product
from sqlalchemy.ext.asyncio import AsyncSession


@dataclass(frozen=True)
class ValidatedCartItem:
    cart_item: CartItem
    product: Product  # row-locked until the transaction ends


async def load_and_validate(
    db: AsyncSession, member: Member, cart_item_ids: Sequence[int]
) -> list[ValidatedCartItem]:
    """Validate cart items in input order; the first failing id decides the error.

    Checks, per id: the cart item exists, its product exists, the member owns
    it, and the quantity fits the current stock.
    """
    validated: list[ValidatedCartItem] = []
    for cart_item_id in cart_item_ids:
        cart_item = await repository.find_cart_item_by_id(db, cart_item_id)
        if not cart_item:
            raise CartItemNotFound(f"Cart item {cart_item_id} not found")

        product = None
        if cart_item.product_id is not None:
            product = await repository.find_product_by_id(
                db, cart_item.product_id, for_update=True
            )
        if not product:
            raise ProductNotFound(
                f"Product {cart_item.product_id} for cart item {cart_item_id} not found"
            )

        if cart_item.member_id != member.id:
            raise NotOwner(f"Cart item {cart_item_id} belongs to another member")

        if cart_item.quantity > product.stock:
            raise QuantityExceedsStock(
                f"Only {product.stock} left of {product.name}, "
                f"cart item {cart_item_id} asks for {cart_item.quantity}"
            )

        validated.append(ValidatedCartItem(cart_item=cart_item, product=product))
    return validated
