"""Order service routers package."""

from services.order_service.routers.orders import router as orders_router
from services.order_service.routers.points import router as points_router

__all__ = [
    "orders_router",
    "points_router",
]
