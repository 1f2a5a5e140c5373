"""Order service commerce models: cart items, orders and order line items."""

from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

# ============================================================================
# CART MODELS
# ============================================================================


class CartItem(Base):
    """Cart line items. Consumed (deleted) by a successful order placement."""

    __tablename__ = "cart_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    member_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )
    # Nulled when the product row is deleted; the cart item is then dangling
    product_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True
    )

    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    __table_args__ = (
        UniqueConstraint("member_id", "product_id", name="unique_member_product"),
        CheckConstraint("quantity > 0", name="positive_quantity"),
    )

    def __repr__(self):
        return f"<CartItem product={self.product_id} qty={self.quantity}>"


# ============================================================================
# ORDER MODELS
# ============================================================================


class Order(Base):
    """Orders. Written once at placement and never updated."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    member_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("members.id"), nullable=False
    )
    # The point record earned by this order
    point_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("points.id"), nullable=False
    )

    used_point: Mapped[int] = mapped_column(BigInteger, nullable=False)
    earned_point: Mapped[int] = mapped_column(BigInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("used_point >= 0", name="non_negative_used_point"),
        CheckConstraint("earned_point >= 0", name="non_negative_earned_point"),
        Index("ix_orders_member_id_created_at", "member_id", "created_at"),
    )

    def __repr__(self):
        return f"<Order {self.id} member={self.member_id}>"


class OrderItem(Base):
    """Order line items (product snapshot at order time)."""

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    # Not a foreign key: the snapshot outlives the product row
    product_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # Snapshot at order time (products may change)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    product_image_url: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True
    )

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (CheckConstraint("quantity > 0", name="positive_order_quantity"),)

    @property
    def line_total(self) -> int:
        return self.product_price * self.quantity

    def __repr__(self):
        return f"<OrderItem {self.product_name} qty={self.quantity}>"
