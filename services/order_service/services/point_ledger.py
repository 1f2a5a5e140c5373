"""Loyalty point policy: which point batches pay for an order, and what it earns.

Pure calculations, no database access. Callers load points and persist the
results.

Redemption order is earliest expiry first, ties broken by the lower id, so the
same inputs always consume the same batches.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional, Sequence

from libs.common.config import get_settings
from libs.common.datetime_utils import as_utc
from services.order_service.exceptions import (
    InsufficientPoints,
    RedemptionExceedsTotal,
)


@dataclass(frozen=True)
class PointPolicy:
    """Accrual rule: a percentage of the paid amount, valid for a fixed window."""

    accrual_percent: int
    validity: timedelta

    @classmethod
    def from_settings(cls) -> "PointPolicy":
        settings = get_settings()
        return cls(
            accrual_percent=settings.POINT_ACCRUAL_PERCENT,
            validity=timedelta(days=settings.POINT_VALIDITY_DAYS),
        )


@dataclass(frozen=True)
class PointDeduction:
    point: Any  # a Point row, or anything with id / left_point / expires_at
    used: int
    left_point: int


@dataclass(frozen=True)
class EarnedPoint:
    member_id: int
    earned_point: int
    earned_at: datetime
    expires_at: datetime


def is_available(point: Any, as_of: datetime) -> bool:
    return point.left_point > 0 and as_utc(point.expires_at) > as_utc(as_of)


def _redemption_order(point: Any) -> tuple:
    return (as_utc(point.expires_at), point.id)


class OrderPoint:
    """Point calculator bound to one accrual policy."""

    def __init__(self, policy: Optional[PointPolicy] = None):
        self.policy = policy or PointPolicy.from_settings()

    def check_redemption(self, used_point: int, total_price: int) -> None:
        if used_point > total_price:
            raise RedemptionExceedsTotal(
                f"Cannot use {used_point} points on an order of {total_price}"
            )

    def use_point(
        self,
        requested: int,
        points: Sequence[Any],
        as_of: Optional[datetime] = None,
    ) -> list[PointDeduction]:
        """Pick the batches that cover ``requested`` and their new balances.

        Only batches that change are returned. Their ``used`` amounts add up
        to exactly ``requested``. Nothing is returned when the balance falls
        short.
        """
        if requested < 0:
            raise ValueError("requested points must be non-negative")

        candidates = sorted(
            (
                p
                for p in points
                if p.left_point > 0 and (as_of is None or is_available(p, as_of))
            ),
            key=_redemption_order,
        )

        available = sum(p.left_point for p in candidates)
        if available < requested:
            raise InsufficientPoints(
                f"Requested {requested} points but only {available} are available"
            )

        deductions: list[PointDeduction] = []
        remaining = requested
        for point in candidates:
            if remaining == 0:
                break
            used = min(point.left_point, remaining)
            deductions.append(
                PointDeduction(point=point, used=used, left_point=point.left_point - used)
            )
            remaining -= used
        return deductions

    def earn_point(
        self,
        member_id: int,
        used_point: int,
        total_price: int,
        earned_at: datetime,
    ) -> EarnedPoint:
        """Points earned by an order, expiring one validity window after ``earned_at``."""
        self.check_redemption(used_point, total_price)
        paid = total_price - used_point
        return EarnedPoint(
            member_id=member_id,
            earned_point=paid * self.policy.accrual_percent // 100,
            earned_at=earned_at,
            expires_at=earned_at + self.policy.validity,
        )
