"""Order Service models package."""

from services.order_service.models.catalog import Member, Product
from services.order_service.models.commerce import CartItem, Order, OrderItem
from services.order_service.models.points import Point

__all__ = [
    "CartItem",
    "Member",
    "Order",
    "OrderItem",
    "Point",
    "Product",
]
