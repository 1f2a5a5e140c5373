"""FastAPI application for the Order Service."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from libs.common.logging import configure_logging, get_logger
from services.order_service.exceptions import OrderServiceError
from services.order_service.routers import orders_router, points_router
from sqlalchemy.exc import SQLAlchemyError

logger = get_logger(__name__)


async def order_service_error_handler(
    request: Request, exc: OrderServiceError
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "detail": exc.detail},
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"code": "storage_unavailable", "detail": "Storage unavailable"},
    )


def create_app() -> FastAPI:
    """Create and configure the Order Service FastAPI app."""
    configure_logging()

    app = FastAPI(
        title="Order Service",
        version="0.1.0",
        description="Cart checkout with loyalty point redemption and accrual.",
    )

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "orders"}

    app.add_exception_handler(OrderServiceError, order_service_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    app.include_router(orders_router)
    app.include_router(points_router)

    return app


app = create_app()
