"""Order service domain exceptions.

Raised by the service layer when a business rule rejects a request. None of
them are retryable. The app maps each one to its ``status_code`` and ``code``.
"""

from fastapi import status


class OrderServiceError(Exception):
    """Base class for rejected order-service requests."""

    code = "order_service_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request rejected"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class CartItemNotFound(OrderServiceError):
    code = "cart_item_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Cart item not found"


class ProductNotFound(OrderServiceError):
    code = "product_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Product not found"


class NotOwner(OrderServiceError):
    """The caller does not own the cart item or order."""

    code = "not_owner"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Resource belongs to another member"


class QuantityExceedsStock(OrderServiceError):
    code = "quantity_exceeds_stock"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Requested quantity exceeds available stock"


class InsufficientPoints(OrderServiceError):
    code = "insufficient_points"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Not enough available points"


class RedemptionExceedsTotal(OrderServiceError):
    code = "redemption_exceeds_total"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Points used cannot exceed the order total"


class TotalPriceMismatch(OrderServiceError):
    """Client-declared total disagrees with the server-side sum of line items."""

    code = "total_price_mismatch"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Declared total price does not match the order items"


class OrderNotFound(OrderServiceError):
    code = "order_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Order not found"
