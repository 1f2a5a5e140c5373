"""Pydantic schemas for order service."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# BIGINT max / 100: earned points stay in range for accrual percents up to 10000
MAX_AMOUNT = (2**63 - 1) // 100

# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderRequest(BaseModel):
    cart_item_ids: list[int] = Field(..., min_length=1)
    point: int = Field(0, ge=0, le=MAX_AMOUNT)  # Points to redeem
    # Client-side cart total, checked server-side
    total_price: int = Field(..., ge=0, le=MAX_AMOUNT)

    @field_validator("cart_item_ids")
    @classmethod
    def unique_cart_item_ids(cls, v: list[int]) -> list[int]:
        if len(set(v)) != len(v):
            raise ValueError("cart_item_ids must not contain duplicates")
        return v


class OrderCreatedResponse(BaseModel):
    order_id: int


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: int
    name: str = Field(validation_alias=AliasChoices("product_name", "name"))
    price: int = Field(validation_alias=AliasChoices("product_price", "price"))
    image_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("product_image_url", "image_url")
    )
    quantity: int


class OrderResponse(BaseModel):
    order_id: int
    created_at: datetime
    items: list[OrderItemResponse]
    total_price: int  # Derived from items, not stored on the order
    used_point: int
    earned_point: int


# ============================================================================
# POINT SCHEMAS
# ============================================================================


class PointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    earned_point: int
    left_point: int
    earned_at: datetime
    expires_at: datetime


class PointSummaryResponse(BaseModel):
    total_available: int
    points: list[PointResponse]
