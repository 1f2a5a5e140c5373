"""Immutable order drafts built from validated cart items, plus the total-price checksum."""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional, Sequence

from services.order_service.exceptions import TotalPriceMismatch

if TYPE_CHECKING:
    from services.order_service.services.cart_validation import ValidatedCartItem


@dataclass(frozen=True)
class OrderItemSnapshot:
    """Product name, price and image frozen at order time."""

    product_id: int
    name: str
    price: int
    image_url: Optional[str]
    quantity: int

    @property
    def line_total(self) -> int:
        return self.price * self.quantity


@dataclass(frozen=True)
class OrderDraft:
    member_id: int
    used_point: int
    earned_point: int
    created_at: datetime
    items: tuple[OrderItemSnapshot, ...]

    @property
    def total_price(self) -> int:
        return sum(item.line_total for item in self.items)


def snapshot_item(validated_item: "ValidatedCartItem") -> OrderItemSnapshot:
    product = validated_item.product
    return OrderItemSnapshot(
        product_id=product.id,
        name=product.name,
        price=product.price,
        image_url=product.image_url,
        quantity=validated_item.cart_item.quantity,
    )


def build_order(
    member_id: int,
    used_point: int,
    earned_point: int,
    created_at: datetime,
    validated_items: Sequence["ValidatedCartItem"],
) -> OrderDraft:
    """Snapshot every item, then freeze the draft. Item order follows the input."""
    items = tuple(snapshot_item(item) for item in validated_items)
    return OrderDraft(
        member_id=member_id,
        used_point=used_point,
        earned_point=earned_point,
        created_at=created_at,
        items=items,
    )


def check_total_price(draft: OrderDraft, declared_total: int) -> None:
    actual = draft.total_price
    if actual != declared_total:
        raise TotalPriceMismatch(
            f"Declared total {declared_total} does not match items total {actual}"
        )
