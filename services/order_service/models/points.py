"""Loyalty point records."""

from datetime import datetime

from libs.db.base import Base
from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
)
from sqlalchemy.orm import Mapped, mapped_column


class Point(Base):
    """One batch of earned points with its own expiry.

    ``left_point`` shrinks as the batch is redeemed; rows are never deleted.
    """

    __tablename__ = "points"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    member_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False
    )

    earned_point: Mapped[int] = mapped_column(BigInteger, nullable=False)
    left_point: Mapped[int] = mapped_column(BigInteger, nullable=False)

    earned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            "left_point >= 0 AND left_point <= earned_point",
            name="valid_left_point",
        ),
        Index("ix_points_member_id_expires_at", "member_id", "expires_at"),
    )

    def __repr__(self):
        return f"<Point {self.id} left={self.left_point}/{self.earned_point}>"
