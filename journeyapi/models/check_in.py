from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from journeyapi.models.base import BaseModel, IdType


class CheckIn(BaseModel):
    """
    Append-only check-in event.

    ``distance_miles`` / ``proximity_overridden`` keep the audit trail for
    check-ins the user force-confirmed outside the proximity threshold.
    """

    __tablename__ = "check_ins"
    __table_args__ = (
        Index("idx_check_ins_user", "user_id"),
        Index("idx_check_ins_journey", "journey_id"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    # no FK: vendors may be served from the fixture catalog
    vendor_id: Mapped[str] = mapped_column(String(64), nullable=False)
    journey_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("journeys.id", ondelete="SET NULL"), nullable=True
    )
    vendor_index: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    check_in_type: Mapped[str] = mapped_column(String(16), nullable=False)
    points_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_journey_check_in: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    distance_miles: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    proximity_overridden: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )


class UserVisit(BaseModel):
    """Visit counter per (user, vendor); feeds the recent-vendors list"""

    __tablename__ = "user_visits"

    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    vendor_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    vendor_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    visit_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_visit_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
